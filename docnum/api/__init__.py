# docnum/api/__init__.py

from flask import Blueprint

api_bp = Blueprint("api", __name__)

# Routes register themselves on api_bp
from . import routes
