from flask_caching import Cache
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

# Database
db = SQLAlchemy()

# Migrations
migrate = Migrate()

# CORS
cors = CORS()

# Caching
cache = Cache()

# Rate Limiting
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["2000 per hour"],
)
