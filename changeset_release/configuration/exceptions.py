"""Contains exceptions raised when reconciling application configuration."""


class RequiredConfigurationElementError(Exception):
    """Raised when a required configuration element is missing."""

    def __init__(self, name: str, cli_name: str | None, env_name: str) -> None:
        """Initializes the exception with the name of the missing element."""
        hint = f"command line option {cli_name}, environment variable {env_name}" if cli_name else f"environment variable {env_name}"
        super().__init__(f"Missing required configuration element: {name} ({hint})")
        self.name = name
        self.cli_name = cli_name
        self.env_name = env_name
