# aula/main.py
# Process entry point: uvicorn aula.main:app
# Settings are read from the environment here, once; a missing SECRET_KEY
# stops the process before it binds a port.
from aula.app.main import create_app

app = create_app()
