"""
config.py - Configuration Management
=====================================
This module handles loading and validating configuration from environment variables.
It reads settings from a .env file and makes them available to the rest of the application.

Environment Variables Used:
---------------------------
- CREDITPOS_ENDPOINT_URL      : (Required) URL of the SOAP endpoint
- CREDITPOS_USERNAME          : (Required) User for HTTP Basic authentication
- CREDITPOS_PASSWORD          : (Required) Password for HTTP Basic authentication
- CREDITPOS_SOAP_ACTION       : (Optional) SOAPAction header (default: "EICreditMgmtCM26_ws_EAI_CM26_Port")
- CREDITPOS_ADR_CODE          : (Optional) Requester code sent as Codice_AdR (default: "AXTR2505")
- CREDITPOS_TIMEOUT_SEC       : (Optional) Request timeout in seconds (default: 60)
- CREDITPOS_INPUT_FILE        : (Optional) Input workbook (default: "input.xlsx")
- CREDITPOS_OUTPUT_FILE       : (Optional) Aggregate XML output (default: "united_output_file.xml")
- CREDITPOS_LOG_DIR           : (Optional) Directory for the error log (default: ".")
- CREDITPOS_CELL_RANGE        : (Optional) Worksheet region to read (default: "A1:J1000")
- CREDITPOS_ESCAPE_VALUES     : (Optional) XML-escape cell values in the envelope (default: true)
- CREDITPOS_CONTINUE_ON_ERROR : (Optional) Skip failed records instead of stopping (default: false)

Example .env file:
------------------
CREDITPOS_ENDPOINT_URL=https://services.example.com/ws/EICreditMgmtCM26
CREDITPOS_USERNAME=AXTR2505
CREDITPOS_PASSWORD=secret
"""

from dataclasses import dataclass
import os
from pathlib import Path
from dotenv import load_dotenv


DEFAULT_SOAP_ACTION = "EICreditMgmtCM26_ws_EAI_CM26_Port"
DEFAULT_ADR_CODE = "AXTR2505"


# =============================================================================
# SETTINGS DATACLASS
# =============================================================================

@dataclass
class Settings:
    """Container for all application configuration values."""

    # Required: where the retrieveCreditPosition requests are posted
    endpoint_url: str

    # Required: HTTP Basic credentials, fixed for the whole run
    username: str
    password: str

    soap_action: str = DEFAULT_SOAP_ACTION

    # Codice_AdR field of every request envelope
    adr_code: str = DEFAULT_ADR_CODE

    # How long to wait for one SOAP response before giving up on it
    timeout_sec: int = 60

    input_file: str = "input.xlsx"
    output_file: str = "united_output_file.xml"
    log_dir: str = "."

    # Only this region of the first worksheet is read
    cell_range: str = "A1:J1000"

    # False inserts cell values into the envelope exactly as read
    escape_values: bool = True

    # True skips a failing record and keeps going; False stops the batch
    continue_on_error: bool = False


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def _clean(v: str | None) -> str | None:
    """
    Clean and normalize an environment variable value.

    Examples:
        _clean('  hello  ')     -> 'hello'
        _clean('"quoted"')      -> 'quoted'
        _clean('')              -> None
        _clean(None)            -> None
    """
    if v is None:
        return None

    v = v.strip()

    if (v.startswith('"') and v.endswith('"')) or (v.startswith("'") and v.endswith("'")):
        v = v[1:-1]

    return v if v else None


def _flag(v: str | None, default: bool) -> bool:
    """Interpret a yes/no environment value; unset means `default`."""
    v = _clean(v)
    if v is None:
        return default
    return v.lower() in ("1", "true", "yes", "on")


# =============================================================================
# MAIN CONFIGURATION LOADER
# =============================================================================

def load_settings() -> Settings:
    """
    Load application configuration from environment variables.

    Returns:
        Settings: A dataclass containing all configuration values

    Raises:
        RuntimeError: If the endpoint URL or the credentials are not set,
            or if the timeout is not a positive integer
    """
    # The .env file lives in the project root (creditpos/ -> project root)
    root_env = Path(__file__).resolve().parents[1] / ".env"
    load_dotenv(dotenv_path=root_env)

    url = _clean(os.getenv("CREDITPOS_ENDPOINT_URL"))
    if not url:
        raise RuntimeError(
            "CREDITPOS_ENDPOINT_URL is not set in environment. "
            "Please add it to your .env file."
        )

    # If someone just puts "services.example.com/ws", we add https://
    if not url.startswith("http"):
        url = "https://" + url

    username = _clean(os.getenv("CREDITPOS_USERNAME"))
    password = _clean(os.getenv("CREDITPOS_PASSWORD"))
    if not (username and password):
        raise RuntimeError(
            "Missing CREDITPOS_USERNAME or CREDITPOS_PASSWORD. "
            "Both are required to authenticate against the SOAP endpoint."
        )

    timeout_raw = _clean(os.getenv("CREDITPOS_TIMEOUT_SEC")) or "60"
    try:
        timeout_sec = int(timeout_raw)
    except ValueError:
        raise RuntimeError(f"CREDITPOS_TIMEOUT_SEC must be an integer, got {timeout_raw!r}")
    if timeout_sec <= 0:
        raise RuntimeError(f"CREDITPOS_TIMEOUT_SEC must be positive, got {timeout_sec}")

    return Settings(
        endpoint_url=url,
        username=username,
        password=password,
        soap_action=_clean(os.getenv("CREDITPOS_SOAP_ACTION")) or DEFAULT_SOAP_ACTION,
        adr_code=_clean(os.getenv("CREDITPOS_ADR_CODE")) or DEFAULT_ADR_CODE,
        timeout_sec=timeout_sec,
        input_file=_clean(os.getenv("CREDITPOS_INPUT_FILE")) or "input.xlsx",
        output_file=_clean(os.getenv("CREDITPOS_OUTPUT_FILE")) or "united_output_file.xml",
        log_dir=_clean(os.getenv("CREDITPOS_LOG_DIR")) or ".",
        cell_range=_clean(os.getenv("CREDITPOS_CELL_RANGE")) or "A1:J1000",
        escape_values=_flag(os.getenv("CREDITPOS_ESCAPE_VALUES"), True),
        continue_on_error=_flag(os.getenv("CREDITPOS_CONTINUE_ON_ERROR"), False),
    )
