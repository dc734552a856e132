"""Static HTML page served at the root path."""

ROUTE_DOCS = [
    ("/search/{query}?page=N", "Search for anime by name"),
    ("/anime/{id}", "Details of a specific anime (catalog id, or a title to search for)"),
    ("/episode/{id}", "Episode stream urls (catalog episode id)"),
    ("/download/{id}", "Episode download urls (catalog episode id)"),
    ("/recent/{page}", "Recently released episodes (page = 1,2,3...)"),
    ("/recommendations/{query}", "Recommendations from AniList for the best match of query"),
    ("/gogoPopular/{page}", "Popular anime from the catalog (page = 1,2,3...)"),
    ("/upcoming/{page}", "Upcoming anime from AniList (page = 1,2,3...)"),
]

_STYLE = (
    "body{font-family:\"Segoe UI\",Tahoma,Geneva,Verdana,sans-serif;margin:0;padding:0;"
    "background-color:#f8f9fa;color:#495057;line-height:1.6}"
    "header{background-color:#343a40;color:#fff;text-align:center;padding:1.5em 0;margin-bottom:1em}"
    "h1{margin-bottom:.5em;font-size:2em;color:#17a2b8}"
    ".container{margin:1em;padding:1em;background-color:#fff;border-radius:8px;"
    "box-shadow:0 0 10px rgba(0,0,0,.1)}"
    "ul{list-style:none;padding:0;margin:0}li{margin-bottom:.5em}"
    "code{background-color:#e5e7eb;padding:.2em .4em;border-radius:4px;"
    "font-family:\"Courier New\",Courier,monospace}"
    "footer{background-color:#343a40;color:#fff;padding:1em 0;text-align:center}"
)


def render_docs_page() -> str:
    routes = "".join(f"<li><code>{path}</code> - {text}</li>" for path, text in ROUTE_DOCS)
    return (
        "<!doctype html><html lang=en><head><meta charset=UTF-8>"
        "<meta content=\"width=device-width,initial-scale=1\" name=viewport>"
        f"<title>AB API</title><style>{_STYLE}</style></head><body>"
        "<header><h1>API Dashboard</h1>"
        "<p>Anime search, details, episodes, downloads, recent releases, recommendations, "
        "popular and upcoming anime. Data comes from the video catalog and AniList.</p></header>"
        f"<div class=container><h2>Routes:</h2><ul>{routes}</ul></div>"
        "<footer><p>AB STREAM API</p></footer></body></html>"
    )


DOCS_PAGE = render_docs_page()
