"""Dashboard page — sends the document head first, then the slow body.

Render once to a file::

    perch render examples/dashboard/page.py -o dashboard.html

Or serve it::

    uvicorn page:app --app-dir examples/dashboard
"""

import time
from pathlib import Path

from perch import View, page_app


def main() -> None:
    with View("Dashboard", Path(__file__).parent) as view:
        view.set_header("Cache-Control", ["no-cache", "no-store"])
        view.render_page_header()

        time.sleep(0.2)  # stands in for slow queries
        view.set("stats", [{"label": "Visitors", "value": 1204}, {"label": "Signups", "value": 37}])
        view.render()


app = page_app(main)
