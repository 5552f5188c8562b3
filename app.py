"""Command line front end: maps subcommands onto HabitStore intents."""

import argparse
import json
import sys
from dataclasses import replace
from datetime import date
from typing import Any, Optional

import analytics
from config import Settings, configure_logging
from errors import HabitPulseError, ValidationError
from microservice_clients import gather_analytics_snapshot
from models import COLORS, REPEAT_TYPES, WEEK, new_habit, parse_day
from repo_json import JSONRepo
from store import HabitStore
from transfer import export_filename


def _print_json(obj: Any) -> None:
    json.dump(obj, sys.stdout, ensure_ascii=False, indent=2, sort_keys=True)
    sys.stdout.write("\n")


def _day_arg(value: str) -> date:
    try:
        return parse_day(value)
    except ValidationError as exc:
        raise argparse.ArgumentTypeError(str(exc))


def create_store(settings: Settings, today: Optional[date] = None) -> HabitStore:
    return HabitStore(JSONRepo(settings.data_path), today=today)


# ---------- Commands ----------
def cmd_today(store: HabitStore, args) -> dict:
    return {
        "progress": analytics.daily_progress(store.data, args.date),
        "habits": analytics.today_board(store.data, args.date),
    }


def cmd_log(store: HabitStore, args) -> dict:
    store.get_habit(args.habit_id)
    if args.count is not None:
        store.update_log(args.habit_id, args.date, args.count)
    elif args.action == "inc":
        store.increment(args.habit_id, args.date)
    elif args.action == "dec":
        store.decrement(args.habit_id, args.date)
    else:
        store.toggle(args.habit_id, args.date)
    return {"habit_id": args.habit_id, "date": args.date.isoformat(),
            "count": store.count_for(args.habit_id, args.date)}


def cmd_add(store: HabitStore, args) -> dict:
    habit = new_habit(
        args.name,
        points=args.points,
        repeat_type=args.repeat,
        repeat_goal=args.goal,
        repeat_days=args.days,
        description=args.description,
        color=args.color or COLORS[0],
    )
    store.save_habit(habit)
    return habit.to_dict()


def cmd_delete(store: HabitStore, args) -> dict:
    habit = store.get_habit(args.habit_id)
    store.delete_habit(habit.id)
    return {"deleted": habit.id}


def cmd_theme(store: HabitStore, args) -> dict:
    if args.theme == "toggle":
        store.toggle_theme()
    else:
        store.set_theme(args.theme)
    return {"theme": store.data.theme}


def cmd_reset(store: HabitStore, args) -> dict:
    store.reset_to_demo()
    return {"habits": len(store.data.habits), "logs": len(store.data.logs)}


def cmd_clear(store: HabitStore, args) -> dict:
    store.clear_all()
    return {"habits": 0, "logs": 0}


def cmd_import(store: HabitStore, args) -> dict:
    try:
        with open(args.file, "r", encoding="utf-8") as f:
            text = f.read()
    except OSError as exc:
        raise HabitPulseError(f"Could not read {args.file}: {exc}")
    store.import_data(text)
    return {"habits": len(store.data.habits), "logs": len(store.data.logs)}


def cmd_export(store: HabitStore, args) -> dict:
    path = args.out or export_filename()
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(store.export_data())
    except OSError as exc:
        raise HabitPulseError(f"Could not write {path}: {exc}")
    return {"exported": path}


def cmd_analytics(store: HabitStore, args) -> dict:
    if args.remote:
        return gather_analytics_snapshot(
            store.data, days=args.days, habit_id=args.habit, today=args.date, settings=args.settings
        )
    data = store.data
    return {
        "progress": analytics.daily_progress(data, args.date),
        "trend": analytics.trend_for_last_days(data, args.days, args.date, args.habit),
        "distribution": analytics.distribution(data, args.habit),
        "streaks": [analytics.streaks(data, h.id, args.date) for h in data.habits],
    }


# ---------- Parser ----------
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="habitpulse", description="Track habits and points.")
    parser.add_argument("--data", help="Path of the JSON data file.")
    parser.add_argument("--date", type=_day_arg, default=None, help="Day to act on (YYYY-MM-DD).")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("today", help="Show today's progress and habits.").set_defaults(func=cmd_today)

    p = sub.add_parser("log", help="Record completions for a habit.")
    p.add_argument("habit_id")
    p.add_argument("action", nargs="?", choices=("inc", "dec", "toggle"), default="toggle")
    p.add_argument("--count", type=int, help="Set the count directly (0 removes the log).")
    p.set_defaults(func=cmd_log)

    p = sub.add_parser("add", help="Create a habit.")
    p.add_argument("name")
    p.add_argument("--points", type=float, default=1)
    p.add_argument("--repeat", choices=REPEAT_TYPES, default="daily")
    p.add_argument("--goal", type=int, default=1)
    p.add_argument("--days", nargs="*", choices=WEEK, default=[])
    p.add_argument("--color")
    p.add_argument("--description")
    p.set_defaults(func=cmd_add)

    p = sub.add_parser("delete", help="Delete a habit (its logs are kept).")
    p.add_argument("habit_id")
    p.set_defaults(func=cmd_delete)

    p = sub.add_parser("theme", help="Set or toggle the theme.")
    p.add_argument("theme", choices=("light", "dark", "toggle"))
    p.set_defaults(func=cmd_theme)

    sub.add_parser("reset", help="Replace everything with demo data.").set_defaults(func=cmd_reset)
    sub.add_parser("clear", help="Delete all habits and logs.").set_defaults(func=cmd_clear)

    p = sub.add_parser("import", help="Replace data with a JSON backup.")
    p.add_argument("file")
    p.set_defaults(func=cmd_import)

    p = sub.add_parser("export", help="Write a JSON backup.")
    p.add_argument("--out")
    p.set_defaults(func=cmd_export)

    p = sub.add_parser("analytics", help="Trend, distribution and streaks.")
    p.add_argument("--days", type=int, choices=(7, 30, 90), default=30)
    p.add_argument("--habit", default="all")
    p.add_argument("--remote", action="store_true", help="Ask the analytics microservice.")
    p.set_defaults(func=cmd_analytics)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    if args.data:
        settings = replace(settings, data_path=args.data)
    args.settings = settings
    args.date = args.date or date.today()

    try:
        store = create_store(settings, args.date)
        _print_json({"ok": True, "result": args.func(store, args)})
    except HabitPulseError as exc:
        _print_json({"ok": False, "error": str(exc)})
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
