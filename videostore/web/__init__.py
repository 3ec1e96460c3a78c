"""Interface web (API REST FastAPI) de VideoStore."""
