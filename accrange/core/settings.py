from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _home_path(*parts: str) -> Path:
    return Path.home().joinpath(*parts)


class Settings(BaseSettings):
    """Application settings.

    All values have defaults, so `accrange run` works without any
    environment. Paths default to the layout used by the catalog build:

      - input:        ~/sequence_lists/blast/db/FASTA/<reduced request list>
      - output:       ~/sequence_lists/blast/db/FASTA/big_run_2.txt
      - catalog root: ~/sequence_lists/genbank_reduced

    The search command is a template with `{prefix}` and `{root}`
    placeholders. Both are shell-quoted before substitution, and the command
    runs through `sh -c` so it may be a pipeline.
    """

    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore", populate_by_name=True
    )

    input_path: Path = Field(
        default_factory=lambda: _home_path(
            "sequence_lists", "blast", "db", "FASTA",
            "nt.gz.reduced.sorted.natural.dedup.reduced.txt",
        ),
        validation_alias="ACCRANGE_INPUT",
    )
    output_path: Path = Field(
        default_factory=lambda: _home_path(
            "sequence_lists", "blast", "db", "FASTA", "big_run_2.txt",
        ),
        validation_alias="ACCRANGE_OUTPUT",
    )
    catalog_root: Path = Field(
        default_factory=lambda: _home_path("sequence_lists", "genbank_reduced"),
        validation_alias="CATALOG_ROOT",
    )

    # Catalog search configuration
    search_command: str = Field(
        default="sift {prefix} {root} -w --binary-skip | sort -k2 -n",
        validation_alias="SEARCH_COMMAND",
        description="Shell command template; must print '<path>: <spec>' lines sorted by number",
    )
    search_timeout: Optional[int] = Field(
        default=None,
        validation_alias="SEARCH_TIMEOUT",
        description="Catalog search timeout in seconds (None blocks until exit)",
    )

    # Resolver behaviour
    require_containment: bool = Field(
        default=False,
        validation_alias="REQUIRE_CONTAINMENT",
        description="Report targets that fall in a gap before the next token as not found",
    )

    # Output / logging
    mirror_console: bool = Field(
        default=True,
        validation_alias="MIRROR_CONSOLE",
        description="Echo every output line to stdout",
    )
    log_file: Optional[Path] = Field(default=None, validation_alias="LOG_FILE")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")


settings = Settings()
