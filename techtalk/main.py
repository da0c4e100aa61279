#run it with uvicorn techtalk.main:app --reload
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv
import logging

from techtalk.api.api_router import api_router
from techtalk.core.config import get_settings
from techtalk.core.errors import ConfigurationError
from techtalk.core.notifications import NotificationDispatcher
from techtalk.core.submission import SubmissionController

# Load environment variables from .env file
load_dotenv()

settings = get_settings()

# Set up logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the contact pipeline; a missing webhook stops startup"""
    logger.info("🚀 Starting TechTalk website backend...")
    try:
        dispatcher = NotificationDispatcher.from_settings(get_settings())
    except ConfigurationError as e:
        logger.error(f"❌ Contact notifications are not configured: {str(e)}")
        raise

    app.state.submission_controller = SubmissionController(dispatcher)
    logger.info("✅ Contact submission pipeline ready")

    yield

    logger.info("TechTalk website backend shut down")


app = FastAPI(title="TechTalk Website Backend", version="1.0.0", lifespan=lifespan)

# CORS setup (adjust origins as needed)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.get("/api/health")
def health_check():
    """
    Health check endpoint.

    Only reports whether integrations are configured, never their values:
    the Slack webhook URL is a credential.
    """
    current = get_settings()
    return {
        "status": "ok",
        "env_vars": {
            "slack_webhook": bool((current.slack_webhook or "").strip()),
            "extra_webhooks": len(current.extra_webhook_url_list),
        },
        "contact_pipeline_ready": getattr(app.state, "submission_controller", None) is not None,
    }
