"""Start the product API with uvicorn.

Host, port, storage file and log level come from the environment (see
``productstore.config``), e.g.::

    PRODUCTS_FILE=/tmp/products.json PORT=9000 python run.py
"""
from productstore.main import run

if __name__ == "__main__":
    run()
