from contextlib import asynccontextmanager
import logging

from app.core.config.scoring import get_scoring_config, scoring_config_path
from app.services.assessment import assessment_enabled

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    # A broken calibration table should stop startup, not the first request.
    config = get_scoring_config()
    logger.info(
        "scoring_config_loaded path=%s sections=%s",
        scoring_config_path(),
        ",".join(sorted(config)),
    )
    logger.info("assessment_state enabled=%s", assessment_enabled())
    yield
