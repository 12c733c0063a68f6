"""
Model package. Exposes the DBStorage singleton used across the API.
The engine is bound by create_app() via storage.reload(database_url).
"""
from models.db_storage import DBStorage

storage = DBStorage()
