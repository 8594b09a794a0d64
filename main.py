from loguru import logger

from orgpulse.logging_config import configure_logging
from orgpulse.session import HudSession


def main() -> None:
    configure_logging()
    session = HudSession()
    logger.info("Built org with {} nodes", len(session.tree))
    print(f"Weakest branch: {session.selected_id}")


if __name__ == "__main__":
    main()
