"""Main module entrypoint for local runtime execution.

This module validates startup configuration, configures logging and either
launches the FastAPI webhook or runs one deployment from the command line.
"""

import argparse
import logging

import uvicorn

from app.bootstrap import bootstrap_create_application, bootstrap_create_deployment_orchestrator
from app.config import AppSettings, config_load_settings
from app.domain import DeploymentRequest

logger = logging.getLogger(__name__)


def main_parse_environment_assignments(assignments: list[str] | None) -> dict[str, str]:
    """Parse repeated `KEY=VALUE` arguments into an environment mapping.

    Args:
        assignments: Raw `--env` argument values.

    Returns:
        dict[str, str]: Parsed environment variables; later keys win.

    Raises:
        ValueError: Raised when an assignment has no `=` or an empty key.
    """

    environment_vars: dict[str, str] = {}
    for assignment in assignments or []:
        key, separator, value = assignment.partition("=")
        if not separator or not key:
            raise ValueError(f"environment assignment must look like KEY=VALUE: {assignment!r}")
        environment_vars[key] = value
    return environment_vars


def main_configure_logging(settings: AppSettings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    """Run selected runtime command with validated startup configuration.

    Returns:
        None: This function does not return a runtime value.

    Raises:
        SettingsLoadError: Raised when configuration validation fails.
    """

    argument_parser = argparse.ArgumentParser(description="Compose deploy webhook runtime entrypoint")
    argument_parser.add_argument(
        "command",
        nargs="?",
        default="api",
        choices=("api", "deploy"),
        help="Runtime command: `api` starts server, `deploy` runs one deployment and exits",
        type=str,
    )
    argument_parser.add_argument(
        "--application-name",
        dest="application_name",
        type=str,
        help="Application to deploy for `deploy`",
    )
    argument_parser.add_argument(
        "--env",
        dest="environment_vars",
        action="append",
        metavar="KEY=VALUE",
        help="Environment variable passed to compose for `deploy`; repeatable",
    )
    argument_parser.add_argument(
        "--extra-file",
        dest="extra_files",
        action="append",
        metavar="NAME",
        help="Extra file fetched after the manifest for `deploy`; repeatable, order preserved",
    )
    parsed_arguments = argument_parser.parse_args()

    settings = config_load_settings()
    main_configure_logging(settings)

    if parsed_arguments.command == "deploy":
        if not (parsed_arguments.application_name or "").strip():
            argument_parser.error("--application-name is required for `deploy`")
        try:
            environment_vars = main_parse_environment_assignments(parsed_arguments.environment_vars)
        except ValueError as error:
            argument_parser.error(str(error))

        orchestrator = bootstrap_create_deployment_orchestrator(settings=settings)
        outcome = orchestrator.job_execute_deployment(
            DeploymentRequest(
                application_name=parsed_arguments.application_name.strip(),
                environment_vars=environment_vars,
                extra_files_to_download=tuple(parsed_arguments.extra_files or ()),
            )
        )
        if not outcome.deployment_succeeded():
            raise SystemExit(1)
        return

    application = bootstrap_create_application(settings=settings)
    logger.info("Server listening on port %s.", settings.port)
    uvicorn.run(
        application,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
