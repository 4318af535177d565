import logging
import sys

logger = logging.getLogger(__name__)


def prompt_for_confirmation_or_exit(message: str = "Are you sure you want to continue?") -> None:
    """
    Prompts for confirmation or exits the program if the user does not confirm.
    """
    try:
        answer = input(f"{message} (y/N) ")
    except EOFError:
        answer = ''
    if answer.strip().lower() not in ('y', 'yes'):
        logger.info("Operation cancelled.")
        sys.exit(1)
