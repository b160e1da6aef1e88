import argparse
import logging
import os
import sys

from iluriaexport.config import DEFAULT_PRODUCTS_FILE, DEFAULT_VARIATIONS_FILE, ExportConfig
from iluriaexport.errors import ConfigError, IluriaExportError
from iluriaexport.pipeline import run
from iluriaexport.progress import ProgressReporter


def build_parser():
    parser = argparse.ArgumentParser(
        prog="iluria-export",
        description="Export products and variations from an Iluria store",
    )
    parser.add_argument('file', help='File with products and variations')
    parser.add_argument('url', nargs='?', default=None, help='Base url to get products (defaults to ILURIA_BASE_URL)')
    parser.add_argument('-l', '--limit', type=int, default=0, help='Limit the number of products to export (0 for all)')
    parser.add_argument('-o', '--output-dir', type=str, default=None, help='Directory for the output files; print to stdout when omitted')
    parser.add_argument('--products-file', type=str, default=DEFAULT_PRODUCTS_FILE)
    parser.add_argument('--variations-file', type=str, default=DEFAULT_VARIATIONS_FILE)
    parser.add_argument('--overwrite', action='store_true', help='Replace existing output files')
    parser.add_argument('--simulate', action='store_true', help='Do not make web requests')
    parser.add_argument('-v', '--verbose', action='store_true', help='Sets the level of verbosity')
    parser.add_argument('--log-file', type=str, default=None)
    return parser


def setup_logging(verbose=False, log_file=None):
    # Only a file name given: place it in the log folder
    if log_file and not os.path.dirname(log_file):
        os.makedirs('log', exist_ok=True)
        log_file = os.path.join('log', log_file)
    logging.basicConfig(
        filename=log_file,
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(message)s'
    )


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose, args.log_file)

    try:
        config = ExportConfig.from_args(args).validate()
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    logging.debug(f"Config is {config}")

    try:
        run(config, ProgressReporter())
    except IluriaExportError as e:
        logging.debug("Fatal error in main", exc_info=True)
        print(f"Fatal error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
