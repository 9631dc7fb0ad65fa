"""
AWS Lambda entry point — wraps the Quality Highlighter FastAPI app with Mangum.
"""

from mangum import Mangum

from quality_highlighter.main import app

handler = Mangum(app, lifespan="off")
