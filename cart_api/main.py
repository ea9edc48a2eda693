# cart_api/main.py
import uvicorn

from cart_api.api import create_app
from cart_api.utils.logging import configure_logging

configure_logging()

app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
