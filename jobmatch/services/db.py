import motor.motor_asyncio
from pymongo import ASCENDING, DESCENDING

from jobmatch.utils.config import MONGO_DETAILS, DB_NAME
from jobmatch.utils.logging_config import get_logger

logger = get_logger(__name__)

logger.info(f"Initializing MongoDB connection to database: {DB_NAME}")

# Initialize client
try:
    client = motor.motor_asyncio.AsyncIOMotorClient(MONGO_DETAILS)
    db = client[DB_NAME]
    logger.info("MongoDB client initialized successfully")
except Exception as e:
    logger.error(f"Failed to initialize MongoDB client: {e}")
    raise

# Collections
parsed_resumes_coll = db["parsed_resumes"]
jobs_coll = db["jobs"]
users_coll = db["users"]


async def _create_index(coll, keys, **kwargs):
    name = f"{coll.name}.({', '.join(k for k, _ in keys)})"
    try:
        await coll.create_index(keys, **kwargs)
        logger.debug(f"Created index on {name}")
    except Exception as e:
        if "already exists" in str(e).lower():
            logger.debug(f"Index on {name} already exists")
        else:
            logger.warning(f"Could not create index on {name}: {e}")


async def init_indexes():
    """Index initialization for collections."""
    logger.info("Starting database index initialization")

    await _create_index(parsed_resumes_coll, [("resume_id", ASCENDING)], unique=True)
    await _create_index(parsed_resumes_coll, [("owner_id", ASCENDING), ("created_at", DESCENDING)])
    await _create_index(parsed_resumes_coll, [("extracted_fields.skills", ASCENDING)])
    await _create_index(jobs_coll, [("job_id", ASCENDING)], unique=True)
    await _create_index(jobs_coll, [("is_active", ASCENDING), ("created_at", DESCENDING)])

    logger.info("Database index initialization completed")


def to_dict(doc):
    if not doc:
        return None
    doc = dict(doc)
    doc.pop("_id", None)
    return doc
