#!/usr/bin/env python3
"""
School Timetable Generator

Usage:
    school-timetable load --data-dir data/               # Import CSV collections into the store
    school-timetable generate --name "Term 1"            # Generate from the stored collections
    school-timetable generate --name T1 --data-dir data/ --seed 7
    school-timetable list                                # List saved timetables
    school-timetable show <id> [--staff]                 # Print class (or staff) grids
    school-timetable delete <id>
"""
import argparse
import sys
from typing import Optional

from dotenv import load_dotenv

from .errors import TimetableError
from .models import GeneratedTimetable
from .scheduler import TimetableGenerator, TimetableVerifier
from .storage import TimetableStore
from .utils import DataLoader, get_settings, setup_logging
from .utils.display import grid_to_frame


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="school-timetable",
        description="Weekly school timetable generator"
    )
    parser.add_argument(
        "--store-dir",
        type=str,
        default=None,
        help="Directory of the JSON timetable store"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    load = subparsers.add_parser("load", help="Import classes, subjects and staff from CSV files")
    load.add_argument("--data-dir", type=str, default=None, help="Directory containing the CSV files")

    generate = subparsers.add_parser("generate", help="Generate and save a timetable")
    generate.add_argument("--name", type=str, required=True, help="Timetable name")
    generate.add_argument(
        "--data-dir",
        type=str,
        default=None,
        help="Read CSV files from this directory instead of the store"
    )
    generate.add_argument("--working-days", type=int, default=6, help="Days per week (1-7)")
    generate.add_argument("--periods-per-day", type=int, default=7, help="Periods per day (1-12)")
    generate.add_argument(
        "--allow-consecutive",
        action="store_true",
        help="Allow the same subject in back-to-back periods"
    )
    generate.add_argument(
        "--hide-free-periods",
        action="store_true",
        help="Leave empty cells blank instead of marking them free"
    )
    generate.add_argument(
        "--balance-staff",
        action="store_true",
        help="Give each period to the least-loaded qualified staff member"
    )
    generate.add_argument(
        "--enforce-assigned-classes",
        action="store_true",
        help="Only schedule subjects into the classes they are assigned to"
    )
    generate.add_argument("--seed", type=int, default=None, help="Random seed for a reproducible schedule")

    subparsers.add_parser("list", help="List saved timetables")

    show = subparsers.add_parser("show", help="Print the grids of a saved timetable")
    show.add_argument("timetable_id", type=str)
    show.add_argument("--staff", action="store_true", help="Print staff grids instead of class grids")

    delete = subparsers.add_parser("delete", help="Delete a saved timetable")
    delete.add_argument("timetable_id", type=str)

    return parser


def cmd_load(args: argparse.Namespace, store: TimetableStore) -> int:
    loader = DataLoader(args.data_dir or get_settings().data_dir)
    loader.load_all()

    store.save_classes(loader.classes)
    store.save_subjects(loader.subjects)
    store.save_staff(loader.staff)

    stats = loader.get_stats()
    print(f"📚 Loaded {stats['total_classes']} classes, {stats['total_subjects']} subjects, "
          f"{stats['total_staff']} staff into {store.store_dir}")
    return 0


def cmd_generate(args: argparse.Namespace, store: TimetableStore) -> int:
    if args.data_dir:
        loader = DataLoader(args.data_dir)
        classes, subjects, staff = loader.classes, loader.subjects, loader.staff
    else:
        classes, subjects, staff = store.get_classes(), store.get_subjects(), store.get_staff()

    constraints = {
        "working_days": args.working_days,
        "periods_per_day": args.periods_per_day,
        "no_consecutive_subjects": not args.allow_consecutive,
        "include_free_periods": not args.hide_free_periods,
        "balance_staff_load": args.balance_staff,
        "enforce_assigned_classes": args.enforce_assigned_classes,
    }
    seed = args.seed if args.seed is not None else get_settings().seed

    generator = TimetableGenerator(seed=seed)
    result = generator.generate(classes, subjects, staff, name=args.name, constraints=constraints)

    for warning in result.warnings:
        print(f"⚠️  {warning}")

    if not result.success:
        print("\n❌ Timetable could not be generated:")
        for error in result.errors:
            print(f"   - {error}")
        return 1

    timetable = result.timetable
    store.save_timetable(timetable)

    stats = generator.get_timetable_stats(timetable)
    verification = TimetableVerifier().verify(timetable)

    print("\n" + "=" * 60)
    print(f"🎉 Generated '{timetable.name}' ({timetable.id})")
    print("=" * 60)
    print(f"   Periods scheduled: {stats['total_scheduled_periods']}/{stats['total_required_periods']}")
    print(f"   Coverage: {stats['coverage_percentage']}%")
    print(f"   Utilization: {stats['utilization_percentage']}%")
    print(f"   Valid: {verification.is_valid} (score {verification.score})")
    if verification.feedback:
        print(verification.feedback)
    return 0


def cmd_list(args: argparse.Namespace, store: TimetableStore) -> int:
    timetables = store.get_timetables()
    if not timetables:
        print("No saved timetables")
        return 0

    for timetable in sorted(timetables, key=lambda t: t.created_at):
        print(f"{timetable.id}  {timetable.created_at:%Y-%m-%d %H:%M}  "
              f"{timetable.name}  ({len(timetable.entries)} periods)")
    return 0


def _print_grids(timetable: GeneratedTimetable, staff_view: bool) -> None:
    if staff_view:
        for view in TimetableGenerator.build_staff_timetables(timetable):
            print(f"\n👤 {view.staff_name}")
            print(grid_to_frame(view.schedule, timetable, show="class").to_string())
    else:
        for view in TimetableGenerator.build_class_timetables(timetable):
            print(f"\n🏫 {view.class_name}")
            print(grid_to_frame(view.schedule, timetable, show="staff").to_string())


def cmd_show(args: argparse.Namespace, store: TimetableStore) -> int:
    timetable = store.get_timetable(args.timetable_id)
    print(f"{timetable.name} (generated {timetable.created_at:%Y-%m-%d %H:%M})")
    _print_grids(timetable, args.staff)
    return 0


def cmd_delete(args: argparse.Namespace, store: TimetableStore) -> int:
    if not store.delete_timetable(args.timetable_id):
        print(f"No timetable with id {args.timetable_id}")
        return 1
    print(f"🧹 Deleted {args.timetable_id}")
    return 0


COMMANDS = {
    "load": cmd_load,
    "generate": cmd_generate,
    "list": cmd_list,
    "show": cmd_show,
    "delete": cmd_delete,
}


def main(argv: Optional[list[str]] = None) -> int:
    load_dotenv()
    settings = get_settings()
    setup_logging(json_output=settings.log_json, log_level=settings.log_level)

    args = build_parser().parse_args(argv)
    store = TimetableStore(args.store_dir or settings.store_dir)

    try:
        return COMMANDS[args.command](args, store)
    except KeyboardInterrupt:
        print("\n\n⚠️ Interrupted by user")
        return 1
    except TimetableError as e:
        print(f"\n❌ Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
