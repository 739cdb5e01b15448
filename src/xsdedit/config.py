"""
Configuration settings for the schema editor.

Values are read from environment variables when this module is imported and
can be overridden per deployment (editor host, CLI, test run).
"""

import os


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() == "true"


class EditorConfig:
    """Editor configuration.

    All values can be overridden via environment variables.
    """

    # Level applied by setup_logging() when no explicit level is passed
    LOG_LEVEL = os.getenv("XSDEDIT_LOG_LEVEL", "INFO").upper()

    # Prefix written for the XML Schema namespace when a document binds none
    XS_PREFIX = os.getenv("XSDEDIT_XS_PREFIX", "xs")

    # Re-parse serialized output before the processor hands it back
    ROUNDTRIP_CHECK = _env_flag("XSDEDIT_ROUNDTRIP_CHECK", "true")

    @classmethod
    def as_dict(cls) -> dict[str, object]:
        """Current settings, for diagnostics."""
        return {
            "log_level": cls.LOG_LEVEL,
            "xs_prefix": cls.XS_PREFIX,
            "roundtrip_check": cls.ROUNDTRIP_CHECK,
        }


editor_config = EditorConfig()
