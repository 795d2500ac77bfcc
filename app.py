"""Clarity journal command line: backups, reset and calendar views over the local data."""

import argparse
import asyncio
import sys
from datetime import date

from config_store import DARK, ConfigStore, active_boolean_habit_count
from entry_store import EntryStore
from errors import BackupImportError
from frequency import PERIODS, frequency_counts
from heatmap import cell_style, month_grid, today_string
from heatmap_image import save_month_png
from logger import setup_logger
from repo_json import JSONStore
from settings import BACKUP_FILENAME, load_settings
from transfer_data import export_backup, factory_reset, import_backup


class App:
    def __init__(self, data_dir: str):
        store = JSONStore(data_dir)
        self.entries = EntryStore(store)
        self.configs = ConfigStore(store)

    def is_dark(self, override=None) -> bool:
        if override is not None:
            return override
        return self.configs.get_theme() == DARK

    # -------- Commands --------
    def export(self, args) -> int:
        count = export_backup(args.path, self.entries, self.configs)
        print(f"Exported {count} entries to {args.path}")
        return 0

    def import_(self, args) -> int:
        try:
            result = asyncio.run(import_backup(args.path, self.entries, self.configs))
        except BackupImportError as exc:
            print(str(exc), file=sys.stderr)
            return 1
        print(f"Imported {result['imported']} entries, skipped {result['skipped']} existing dates.")
        return 0

    def reset(self, args) -> int:
        if not args.yes:
            print("Refusing to erase all data without --yes.", file=sys.stderr)
            return 1
        factory_reset(self.entries, self.configs)
        print("All entries erased; catalog restored to defaults.")
        return 0

    def calendar(self, args) -> int:
        today = today_string()
        is_dark = self.is_dark(args.dark)
        count = active_boolean_habit_count(self.configs.get_configs())
        entries = {e.date: e for e in self.entries.get_all_entries()}
        for week in month_grid(args.year, args.month):
            cells = []
            for day in week:
                if day is None:
                    cells.append(" " * 9)
                    continue
                style = cell_style(day, entries.get(day), today, is_dark, count)
                cells.append(style.color.to_hex() + "  " if style.color else day[-2:].rjust(9))
            print(" ".join(cells))
        return 0

    def frequency(self, args) -> int:
        # --period month defaults to the current month
        today = date.today()
        items = frequency_counts(
            self.entries.get_all_entries(),
            self.configs.get_configs(),
            args.period,
            args.year or today.year,
            args.month or today.month,
            today,
        )
        if not items:
            print("Nothing logged in this period")
        for item in items:
            print(f"{item.count:4d}  {item.label} ({item.type})")
        return 0

    def render(self, args) -> int:
        entries = {e.date: e for e in self.entries.get_all_entries()}
        path = save_month_png(
            args.out,
            entries,
            args.year,
            args.month,
            is_dark=self.is_dark(args.dark),
            active_boolean_habit_count=active_boolean_habit_count(self.configs.get_configs()),
        )
        print(f"Wrote {path}")
        return 0


def serve(port: int, data_dir: str) -> int:
    from microservices.heatmap_service import run_server

    run_server(port, data_dir)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="clarity", description=__doc__)
    parser.add_argument("--data-dir", help="Directory of the local store (default: $CLARITY_DATA_DIR or ./data)")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("export", help="Write a backup file")
    p.add_argument("path", nargs="?", default=BACKUP_FILENAME)

    p = sub.add_parser("import", help="Merge a backup file into the local data")
    p.add_argument("path")

    p = sub.add_parser("reset", help="Erase all entries and restore the default catalog")
    p.add_argument("--yes", action="store_true")

    for name in ("calendar", "render"):
        p = sub.add_parser(name, help=f"{name.capitalize()} one month of the heatmap")
        p.add_argument("year", type=int)
        p.add_argument("month", type=int)
        if name == "render":
            p.add_argument("out")
        p.add_argument("--dark", action="store_true", default=None)

    p = sub.add_parser("frequency", help="How often each habit and moment was logged")
    p.add_argument("--period", choices=PERIODS, default="always")
    p.add_argument("--year", type=int)
    p.add_argument("--month", type=int)

    p = sub.add_parser("serve", help="Run the heatmap microservice")
    p.add_argument("--port", type=int)
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings()
    setup_logger(settings.log_file, settings.log_level)
    data_dir = args.data_dir or settings.data_dir

    if args.command == "serve":
        return serve(args.port or settings.heatmap_port, data_dir)

    app = App(data_dir)
    handlers = {
        "export": app.export,
        "import": app.import_,
        "reset": app.reset,
        "calendar": app.calendar,
        "frequency": app.frequency,
        "render": app.render,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
