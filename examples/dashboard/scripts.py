import posixpath


def render(ctx):
    ready = posixpath.join(posixpath.dirname(ctx.path), "ready")
    return ctx.view.script(ready, {"stat_count": len(ctx["stats"])}, path=True, anonymous=True)
