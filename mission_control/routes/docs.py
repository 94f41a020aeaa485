from flask import Blueprint, render_template, request
import markdown2

from .. import get_store
from ..formatting import format_date
from ..models import Document, DOCUMENT_CATEGORIES

docs_bp = Blueprint('docs', __name__)


def filter_documents(documents, search='', category='All'):
    needle = (search or '').strip().lower()
    matches = []
    for doc in documents:
        if category != 'All' and doc.category != category:
            continue
        if needle and needle not in (doc.title or '').lower() and needle not in (doc.filename or '').lower():
            continue
        matches.append(doc)
    return matches


def find_selected(documents, selected_id):
    if not selected_id:
        return None
    return next((doc for doc in documents if doc.id == selected_id), None)


def document_date(doc: Document):
    return format_date(doc.updated_at or doc.created_at)


def render_content(text: str) -> str:
    return markdown2.markdown(
        text or '',
        safe_mode='escape',
        extras=["fenced-code-blocks", "break-on-newline", "tables"]
    )


@docs_bp.route('/docs')
def docs_vault():
    store = get_store()
    search = request.args.get('q', '')
    category = request.args.get('category', 'All')
    if category not in DOCUMENT_CATEGORIES:
        category = 'All'

    documents = []
    if store.is_configured:
        result = (store.table('documents')
                  .select('*')
                  .order('updated_at', ascending=False)
                  .execute())
        documents = Document.from_rows(result.rows)

    filtered = filter_documents(documents, search, category)
    selected = find_selected(filtered, request.args.get('doc'))

    return render_template('docs.html',
                           documents=filtered,
                           selected=selected,
                           selected_html=render_content(selected.content) if selected else '',
                           selected_date=document_date(selected) if selected else '',
                           search=search,
                           category=category,
                           categories=DOCUMENT_CATEGORIES)
