from flask import Blueprint, render_template, jsonify

from .. import get_store

pages_bp = Blueprint('pages', __name__)

TAGLINE = "An autonomous organization of AI agents that does work for me and produces value 24/7"

LEAD = {
    'name': "Samantha",
    'role': "Chief of Staff",
    'description': "Orchestrates, delegates, keeps everything moving. First point of contact between Rui and the machine.",
    'skills': ["Orchestration", "Strategy", "Memory"],
}

TEAM = [
    {
        'name': "Scout",
        'role': "Market Research Analyst",
        'description': "Finds winning niches, tracks competitors, spots trends before they peak.",
        'skills': ["Research", "Trends", "Intel"],
    },
    {
        'name': "Quill",
        'role': "Content Strategist",
        'description': "Drafts book outlines, ad copy, author briefs, and blurbs. Words that sell.",
        'skills': ["Writing", "Strategy", "Voice"],
    },
    {
        'name': "Pixel",
        'role': "Ad Creative Director",
        'description': "Generates FB ad creatives, book cover concepts, and visual mockups.",
        'skills': ["Visual", "FB Ads", "Creative"],
    },
    {
        'name': "Echo",
        'role': "Launch Manager",
        'description': "Orchestrates book launches, manages ad campaigns, tracks ROAS.",
        'skills': ["Launches", "Ads", "Analytics"],
    },
]

META = {
    'name': "Rex",
    'role': "Lead Engineer",
    'description': "Builds tools, automation pipelines, and the technical infrastructure that makes everything run.",
    'skills': ["Code", "Automation", "Systems"],
}


@pages_bp.route('/team')
def team():
    return render_template('team.html', tagline=TAGLINE, lead=LEAD, team=TEAM, meta=META)


@pages_bp.route('/unauthorized')
def unauthorized():
    return render_template('unauthorized.html'), 403


@pages_bp.route('/healthz')
def healthz():
    return jsonify({'status': 'ok', 'store_configured': get_store().is_configured})
