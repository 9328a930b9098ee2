#setup: pip install -e ".[test]"
#setup: python -m investcalc            (or: flask --app investcalc.app run --port 5000 --debug)

import os

from investcalc.app import create_app

app = create_app()

if __name__ == "__main__":
    app.run(port=int(os.environ.get("PORT", "5000")), debug=app.config.get("DEBUG", False))
