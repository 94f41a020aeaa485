from .feed import feed_bp
from .tasks import tasks_bp
from .calendar import calendar_bp
from .docs import docs_bp
from .projects import projects_bp
from .pages import pages_bp

def register_routes(app):
    app.register_blueprint(feed_bp)
    app.register_blueprint(tasks_bp)
    app.register_blueprint(calendar_bp)
    app.register_blueprint(docs_bp)
    app.register_blueprint(projects_bp)
    app.register_blueprint(pages_bp)
