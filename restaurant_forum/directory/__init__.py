"""
Restaurant directory core.

Responsibilities:
- Turn raw page/limit query values into offsets and page links.
- Annotate restaurant rows with the viewer's favorited/liked flags.
- Assemble the filtered, paginated restaurant listing with its category facet.
- Rank restaurants by favorite count and backfill to a fixed-size top list.
- Compose detail, dashboard and feed views for a single request.
"""
