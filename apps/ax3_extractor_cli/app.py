import argparse
import logging
import sys

from config import Config
from core.signal_processing import WindowSizeError
from vendors.axivity.decoder import ShortReadError
from vendors.axivity.importer import ChannelMode
from vendors.axivity.processor import process_cwa_file

logger = logging.getLogger(__name__)


class AX3ExtractorApp:
    """
    Command Line Interface (CLI) application for Axivity AX3 recordings.

    Extracts the temperature or light channel of a .cwa file into a
    'timestamp, value' text file.

    Features:
    - Optional centered moving-average smoothing.
    - Optional per-hour summary statistics appended to a shared CSV.
    - Optional integrity diagnostics (magic, declared length, checksum).
    """

    def __init__(self, argv: list[str] | None = None):
        """
        Parses arguments. Configuration errors exit here, before any file is touched.
        """
        self.args = self.parse_args(argv)
        self.mode = ChannelMode.TEMPERATURE if self.args.temperature else ChannelMode.LIGHT

    @staticmethod
    def build_parser() -> argparse.ArgumentParser:
        """Builds the argument parser."""
        parser = argparse.ArgumentParser(
            prog="ax3-extract",
            description="Axivity AX3 Temperature/Light Extractor",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
    %(prog)s -t -i 1234567_data.cwa -o temps.csv              # Temperature
    %(prog)s -l -i 1234567_data.cwa -o light.csv -a 50        # Light, smoothed (window 50)
    %(prog)s -t -i 1234567_data.cwa -o temps.csv -s sum.csv   # Append summary statistics
            """,
        )

        mode_group = parser.add_mutually_exclusive_group(required=True)
        mode_group.add_argument(
            "-t",
            "--temperature",
            action="store_true",
            help="Temperature mode",
        )
        mode_group.add_argument(
            "-l",
            "--light",
            action="store_true",
            help="Light mode",
        )

        parser.add_argument(
            "-i",
            "--input",
            required=True,
            metavar="FILE",
            help="Path to .cwa input file",
        )
        parser.add_argument(
            "-o",
            "--output",
            required=True,
            metavar="FILE",
            help="Path to output file to be generated",
        )
        parser.add_argument(
            "-s",
            "--summary",
            metavar="FILE",
            default=Config.SUMMARY_FILE,
            help="Path to summary statistics file (appends if exists)",
        )
        parser.add_argument(
            "-a",
            "--average",
            type=int,
            nargs="?",
            const=Config.DEFAULT_WINDOW_SIZE,
            default=None,
            metavar="WINDOW",
            help=f"Apply a central moving average (default window: {Config.DEFAULT_WINDOW_SIZE})",
        )
        parser.add_argument(
            "--strict",
            action="store_true",
            default=Config.STRICT_VALIDATION,
            help="Warn about records with bad magic, length or checksum",
        )
        parser.add_argument(
            "--keep-fraction",
            action="store_true",
            help="Keep fractional degrees instead of truncating to integers",
        )
        parser.add_argument(
            "--show-header",
            action="store_true",
            help="Print the decoded header record as soon as it is read",
        )
        parser.add_argument(
            "-v",
            "--verbose",
            action="store_true",
            help="Enable verbose output",
        )
        parser.add_argument(
            "-d",
            "--debug",
            action="store_true",
            help="Enable debug output",
        )

        return parser

    def parse_args(self, argv: list[str] | None) -> argparse.Namespace:
        parser = self.build_parser()
        args = parser.parse_args(argv)

        # -a without a value falls back to the configured default, which is a raw string
        if isinstance(args.average, str):
            try:
                args.average = int(args.average)
            except ValueError:
                parser.error(f"AX3_WINDOW_SIZE must be an integer, got {args.average!r}")

        if args.average is not None and args.average < 1:
            parser.error(f"window size must be positive, got {args.average}")

        return args

    def setup_logging(self) -> None:
        """Configure logging based on verbosity flags."""
        if self.args.debug:
            level = logging.DEBUG
        elif self.args.verbose:
            level = logging.INFO
        else:
            level = getattr(logging, Config.LOG_LEVEL, logging.WARNING)

        logging.basicConfig(
            level=level,
            format="%(asctime)s.%(msecs)03d [%(levelname)s] %(message)s",
            datefmt="%H:%M:%S",
        )

    def run_app(self) -> int:
        """
        Runs the extraction.

        Returns:
            int: Process exit code, 0 on success, 1 on a fatal error.
        """
        self.setup_logging()

        try:
            result = process_cwa_file(
                self.args.input,
                self.args.output,
                self.mode,
                window_size=self.args.average,
                strict=self.args.strict,
                truncate=not self.args.keep_fraction,
                summary_path=self.args.summary,
                show_header=self.args.show_header,
            )

        except ShortReadError as e:
            logger.error("Error occurred reading header of %s: %s", self.args.input, e)
            return 1
        except WindowSizeError as e:
            logger.error("%s", e)
            return 1
        except OSError as e:
            logger.error("I/O error: %s", e)
            return 1

        logger.info("Wrote %d %s rows to %s", result.rows_written, self.mode.value, self.args.output)

        return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point of the script."""
    app = AX3ExtractorApp(argv)

    return app.run_app()


if __name__ == "__main__":
    sys.exit(main())
