import logging
import sys


def setup_logging(level=logging.INFO):
    """Configures the root logger with a standard format."""
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] %(levelname)s - %(name)s - %(message)s",
        datefmt="%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )


def get_logger(name: str):
    return logging.getLogger(name)


def sanitize(s: str) -> str:
    # Allow alphanumeric, space, dash, underscore, dots, commas, parens
    allowed = set(" -_.,()")
    return "".join(c for c in s if c.isalnum() or c in allowed).strip()


def status_icon(covered) -> str:
    if covered is None:
        return "—"
    return "✅" if covered else "❌"
