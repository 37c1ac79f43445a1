"""
Best-effort copy to the system clipboard.

Streamlit code runs on the server, so the copy happens in the browser via a
zero-height HTML component. The component cannot report back, so success
means the snippet was handed to the browser.
"""

import json
import logging

import streamlit.components.v1 as components

from .error_handler import ErrorHandler, ErrorType
from .ui_feedback import Notify

logger = logging.getLogger(__name__)

_COPY_SCRIPT = """
<script>
(function() {{
  const text = {payload};
  const fallback = () => {{
    const area = document.createElement("textarea");
    area.value = text;
    document.body.appendChild(area);
    area.select();
    document.execCommand("copy");
    document.body.removeChild(area);
  }};
  if (navigator.clipboard && navigator.clipboard.writeText) {{
    navigator.clipboard.writeText(text).catch(fallback);
  }} else {{
    fallback();
  }}
}})();
</script>
"""


def build_copy_script(text: str) -> str:
    """HTML snippet that copies text; the payload is embedded as a JSON string literal."""
    # "</" would terminate the script element early
    payload = json.dumps(text).replace("</", "<\\/")
    return _COPY_SCRIPT.format(payload=payload)


def copy_to_clipboard(text: str, label: str = "JSON") -> bool:
    """
    Copy text to the system clipboard and acknowledge it with a toast.

    Args:
        text: Text to copy
        label: What is being copied, used in the notification

    Returns:
        True if the copy snippet was rendered, False on failure
    """
    try:
        components.html(build_copy_script(text), height=0)
    except Exception as e:
        ErrorHandler.handle_error(e, f"copying {label} to clipboard", ErrorType.CLIPBOARD, inline=False)
        return False

    logger.debug(f"Copied {len(text)} characters of {label} to clipboard")
    Notify.success(f"{label} copied to clipboard")
    return True
