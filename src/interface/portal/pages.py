"""HTML pages for the portal.

Plain ``string.Template`` markup; every value is escaped before substitution.
"""

from html import escape
from string import Template
from typing import Optional

from src.auth.user_store import User

_LAYOUT = Template("""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <title>$title</title>
</head>
<body>
    <div class="app-container">
        <main>
$body
        </main>
    </div>
</body>
</html>
""")

_LOGIN = Template("""
<div class="login-container">
    <form method="post" action="/login" class="login-form">
        <h2>Annyeong, Chingu!</h2>
        $error
        <input type="email" name="email" placeholder="Email" value="$email">
        <input type="password" name="password" placeholder="Password">
        <button type="submit">LOG IN</button>
        <p class="form-footer">
            Don't have an account? <a href="/signup" class="link">Sign up</a>
        </p>
    </form>
</div>
""")

_SIGNUP = Template("""
<div class="login-container">
    <form method="post" action="/signup" class="login-form">
        <h2>Sign Up</h2>
        $error
        <input type="email" name="email" placeholder="Email" value="$email">
        <input type="password" name="password" placeholder="Password">
        <input type="password" name="confirm_password" placeholder="Confirm Password">
        <button type="submit">Sign Up</button>
        <p class="form-footer">
            Already have an account? <a href="/login" class="link">Log in</a>
        </p>
    </form>
</div>
""")

_DASHBOARD = Template("""
<div class="dashboard-container">
    <div class="dashboard-header">
        <h1>Welcome, $name</h1>
        <form method="post" action="/logout">
            <button type="submit" class="logout-button">Logout</button>
        </form>
    </div>

    <div class="dashboard-profile">
        <h2>Profile Overview</h2>
        <p>Course: $course</p>
        <p class="user-quote">$quote</p>
    </div>

    <div class="dashboard-stats">
        <h2>Academic Stats</h2>
        <div class="stats-grid">
            <div class="stat-card"><h3>Current GPA</h3><p>$gpa</p></div>
            <div class="stat-card"><h3>Completed Credits</h3><p>$completed_credits</p></div>
            <div class="stat-card"><h3>Current Semester</h3><p>$current_semester</p></div>
            <div class="stat-card"><h3>Organization</h3><p>$organization</p></div>
        </div>
    </div>

    <div class="dashboard-recent-activity">
        <h2>Recent Activities</h2>
        <ul>
$activities
        </ul>
    </div>
</div>
""")

_ACTIVITY = Template(
    '            <li id="activity-$id">'
    '<span class="activity-action">$action</span>'
    '<span class="activity-time">$time</span></li>'
)

_NOT_FOUND = """
<div class="not-found">
    <h1>404 - Page Not Found</h1>
    <p>The page you are looking for doesn't exist.</p>
    <a href="/login" class="link">Return to Login</a>
</div>
"""


def _error_block(message: Optional[str]) -> str:
    if not message:
        return ""
    return f'<p class="error-message">{escape(message)}</p>'


def _page(title: str, body: str) -> str:
    return _LAYOUT.substitute(title=escape(title), body=body)


def render_login(error: Optional[str] = None, email: str = "") -> str:
    return _page("Log In", _LOGIN.substitute(error=_error_block(error), email=escape(email)))


def render_signup(error: Optional[str] = None, email: str = "") -> str:
    return _page("Sign Up", _SIGNUP.substitute(error=_error_block(error), email=escape(email)))


def render_dashboard(user: User) -> str:
    stats = user.academic_stats
    activities = "\n".join(
        _ACTIVITY.substitute(
            id=activity.id,
            action=escape(activity.action),
            time=escape(activity.time),
        )
        for activity in user.recent_activities
    )
    body = _DASHBOARD.substitute(
        name=escape(user.name),
        course=escape(user.course),
        quote=escape(user.quote),
        gpa=escape(stats.gpa),
        completed_credits=stats.completed_credits,
        current_semester=escape(stats.current_semester),
        organization=escape(stats.organization_involvement),
        activities=activities,
    )
    return _page("Dashboard", body)


def render_not_found() -> str:
    return _page("Page Not Found", _NOT_FOUND)
