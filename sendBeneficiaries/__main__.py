"""
Main entry point for the sendBeneficiaries package when run as a module.

Commands:
  token     fetch an auth token and store it in the .env file
  validate  validate every CSV row against the Airwallex API
  create    create the beneficiaries that passed validation
  flatten   show the JSON bodies a CSV turns into, without calling the API

Uses Python 3.10+ type annotations.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from sendBeneficiaries.api_client import BeneficiaryApiClient
from sendBeneficiaries.batch_processor import BeneficiaryBatchProcessor
from sendBeneficiaries.config import (
    ENV_FILE, CSV_ENCODING, get_config, get_base_url, get_timeout,
    load_env_file, get_credentials, get_token, save_token
)
from sendBeneficiaries.csv_converter import CSVConverter
from sendBeneficiaries.error_formatter import format_error, format_validation_report
from sendBeneficiaries.errors import SendBeneficiariesError
from sendBeneficiaries.exporters import ResultExporter
from sendBeneficiaries.logging_config import configure_logging

# Set up logger
logger = logging.getLogger("sendBeneficiaries")


def setup_argparse() -> argparse.ArgumentParser:
    """
    Set up command-line argument parsing.
    """
    parser = argparse.ArgumentParser(
        prog="sendbeneficiaries",
        description="Validate and create Airwallex beneficiaries from a CSV file"
    )

    # Configuration file parameters
    parser.add_argument(
        "--config",
        help="Path to configuration file (YAML or JSON)"
    )
    parser.add_argument(
        "--profile",
        default="default",
        help="Configuration profile to use (for multi-environment setups)"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Request timeout in seconds (default: 30)"
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable progress bars"
    )

    # Logging options
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error", "critical"],
        default="info",
        help="Set logging level (default: info)"
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Output logs in JSON format"
    )
    parser.add_argument(
        "--log-file",
        help="Write logs to specified file"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Options shared by the commands that talk to the API
    api_options = argparse.ArgumentParser(add_help=False)
    api_options.add_argument(
        "--prod",
        action="store_true",
        help="Use production environment (default: demo)"
    )
    api_options.add_argument(
        "--env",
        type=Path,
        default=Path(ENV_FILE),
        help="Path to the .env file (default: .env)"
    )

    subparsers.add_parser(
        "token",
        parents=[api_options],
        help="Fetch an auth token using CLIENT_ID and API_KEY and save it to .env"
    )

    validate_parser = subparsers.add_parser(
        "validate",
        parents=[api_options],
        help="Validate each CSV row against the beneficiary validation endpoint"
    )
    validate_parser.add_argument(
        "-i", "--input",
        type=Path,
        required=True,
        help="Input CSV file path"
    )
    validate_parser.add_argument(
        "--output-dir",
        type=Path,
        help="Directory for validation_results.json and validation_errors.csv (default: current directory)"
    )

    create_parser = subparsers.add_parser(
        "create",
        parents=[api_options],
        help="Create the beneficiaries listed in validation_results.json"
    )
    create_parser.add_argument(
        "--results",
        type=Path,
        help="Validation results file to replay (default: <output-dir>/validation_results.json)"
    )
    create_parser.add_argument(
        "--output-dir",
        type=Path,
        help="Directory for beneficiary_create_result.json (default: current directory)"
    )

    flatten_parser = subparsers.add_parser(
        "flatten",
        help="Convert a CSV to the JSON bodies that would be sent, without calling the API"
    )
    flatten_parser.add_argument(
        "-i", "--input",
        type=Path,
        required=True,
        help="Input CSV file path"
    )
    flatten_parser.add_argument(
        "-o", "--output",
        type=Path,
        help="Output JSON file (default: print to stdout)"
    )

    return parser


def _report_error(error: Exception) -> None:
    logger.error("%s", getattr(error, "message", str(error)))
    print(format_error(error, use_colors=sys.stderr.isatty()), file=sys.stderr)


def _build_client(args: argparse.Namespace, api_token: str | None = None) -> BeneficiaryApiClient:
    timeout = args.timeout if args.timeout is not None else get_timeout()
    return BeneficiaryApiClient(
        api_token=api_token,
        base_url=get_base_url(args.prod),
        timeout=timeout
    )


def _show_progress(args: argparse.Namespace) -> bool:
    return not args.no_progress and bool(get_config("show_progress", True))


def handle_token_command(args: argparse.Namespace) -> int:
    """
    Handle the token command: log in and persist the token to the .env file.

    The token is printed on stdout so it can be captured by scripts.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        load_env_file(args.env)
        client_id, api_key = get_credentials()

        client = _build_client(args)
        token = client.login(client_id, api_key)

        save_token(token.token, args.env)
        logger.info("Token saved to %s", args.env)
        print(token.token)
        return 0

    except SendBeneficiariesError as e:
        _report_error(e)
        return 1


def handle_validate_command(args: argparse.Namespace) -> int:
    """
    Handle the validate command.

    Rows that fail validation are reported and written to the errors CSV;
    they do not make the command fail.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        load_env_file(args.env)
        api_token = get_token()

        processor = BeneficiaryBatchProcessor(
            client=_build_client(args, api_token),
            converter=CSVConverter(encoding=get_config("csv_encoding", CSV_ENCODING)),
            show_progress=_show_progress(args)
        )
        results, errors = processor.validate_csv(args.input)

        print(format_validation_report(results, errors))

        exporter = ResultExporter(export_dir=args.output_dir or get_config("output_dir"))
        exporter.export_validation_results(results)
        exporter.export_errors_csv(errors)
        return 0

    except SendBeneficiariesError as e:
        _report_error(e)
        return 1


def handle_create_command(args: argparse.Namespace) -> int:
    """
    Handle the create command: replay validated records to the create endpoint.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        load_env_file(args.env)
        api_token = get_token()

        exporter = ResultExporter(export_dir=args.output_dir or get_config("output_dir"))
        validation_results = exporter.load_validation_results(args.results)

        processor = BeneficiaryBatchProcessor(
            client=_build_client(args, api_token),
            show_progress=_show_progress(args)
        )
        create_results = processor.create_from_results(validation_results)

        exporter.export_create_results(create_results)
        return 0

    except SendBeneficiariesError as e:
        _report_error(e)
        return 1


def handle_flatten_command(args: argparse.Namespace) -> int:
    """
    Handle the flatten command: print or save the nested records of a CSV.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    converter = CSVConverter(encoding=get_config("csv_encoding", CSV_ENCODING))
    try:
        if args.output:
            converter.convert_file(args.input, args.output)
        else:
            records = converter.records(args.input)
            print(json.dumps(records, ensure_ascii=False, indent=2))
        return 0

    except SendBeneficiariesError as e:
        _report_error(e)
        return 1


COMMAND_HANDLERS = {
    "token": handle_token_command,
    "validate": handle_validate_command,
    "create": handle_create_command,
    "flatten": handle_flatten_command,
}


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the sendBeneficiaries module.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = setup_argparse()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help(sys.stderr)
        return 1

    try:
        configure_logging(
            level=args.log_level.upper(),
            json_output=args.json_logs,
            log_file=args.log_file
        )

        # Initialize configuration manager with provided file and profile
        if args.config or args.profile != "default":
            import sendBeneficiaries.config
            sendBeneficiaries.config.config_manager = sendBeneficiaries.config.ConfigManager(
                config_file=args.config,
                profile=args.profile
            )
            if args.config:
                logger.info("Using configuration file: %s (profile: %s)", args.config, args.profile)
            else:
                logger.info("Using configuration profile: %s", args.profile)
    except SendBeneficiariesError as e:
        _report_error(e)
        return 1

    logger.debug("sendBeneficiaries starting command %s", args.command)

    try:
        return COMMAND_HANDLERS[args.command](args)

    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        return 130  # Standard Unix exit code for SIGINT
    except Exception as e:
        logger.critical("Unhandled exception: %s", str(e), exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
