from flask import Flask, Blueprint, current_app, g, jsonify, request, Response
from werkzeug.exceptions import NotFound, RequestEntityTooLarge
import os

from models import db
from models.vault_item import ItemType
from models.vault_store import VaultStore, DEFAULT_NAMESPACE
from patterns.chain_of_responsibility import (
    UploadCandidate, TextContentHandler, build_note_chain, build_image_chain, build_pdf_chain, validate, MB,
)
from patterns.observer import Toast, ToastSubject, ToastCollector, ToastLogger, destructive
from patterns.storage_port import SQLAlchemyStorage
from utils.data_url import file_to_data_url, parse_data_url
from utils.dates import format_date
from utils.log import configure_logging, get_logger

log = get_logger(__name__)

basedir = os.path.abspath(os.path.dirname(__file__))

api = Blueprint('api', __name__, url_prefix='/api')

UPLOAD_KINDS = {
    'images': ItemType.IMAGE,
    'pdfs': ItemType.PDF,
}


def _default_config():
    return {
        'SQLALCHEMY_DATABASE_URI': os.environ.get(
            'VAULT_DATABASE_URI', 'sqlite:///' + os.path.join(basedir, 'database', 'vault.db')),
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'VAULT_NAMESPACE': os.environ.get('VAULT_NAMESPACE', DEFAULT_NAMESPACE),
        'VAULT_MAX_UPLOAD_MB': float(os.environ.get('VAULT_MAX_UPLOAD_MB', 5)),
        'VAULT_MAX_PDF_MB': float(os.environ.get('VAULT_MAX_PDF_MB', 4)),
        'VAULT_LOG_LEVEL': os.environ.get('VAULT_LOG_LEVEL', 'INFO'),
    }


def create_app(test_config=None):
    app = Flask(__name__)
    app.config.from_mapping(_default_config())
    if test_config:
        app.config.from_mapping(test_config)
    # Leave headroom so slightly oversized files still reach the validation chain
    if app.config.get('MAX_CONTENT_LENGTH') is None:
        app.config['MAX_CONTENT_LENGTH'] = int((app.config['VAULT_MAX_UPLOAD_MB'] + 1) * MB)

    configure_logging(app.config['VAULT_LOG_LEVEL'])
    db.init_app(app)

    app.extensions['vault_store'] = VaultStore(SQLAlchemyStorage(), namespace=app.config['VAULT_NAMESPACE'])
    app.register_blueprint(api)

    @app.before_request
    def attach_toasts():
        # One subject per request; the collector ends up in the JSON reply
        g.toast_subject = ToastSubject()
        g.toast_collector = ToastCollector()
        g.toast_subject.attach(g.toast_collector)
        g.toast_subject.attach(ToastLogger(log))

    @app.errorhandler(RequestEntityTooLarge)
    def too_large(exc):
        max_mb = current_app.config['VAULT_MAX_UPLOAD_MB']
        return jsonify({'error': 'too_large',
                        'toasts': [destructive('File too large', f'Maximum file size is {max_mb:g}MB').to_dict()]}), 413

    @app.errorhandler(NotFound)
    def not_found(exc):
        return jsonify({'error': 'not_found'}), 404

    @app.route('/')
    def home():
        store = get_store()
        return jsonify({
            'notes': len(store.get_notes()),
            'images': len(store.get_images()),
            'pdfs': len(store.get_pdfs()),
        })

    with app.app_context():
        if app.config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite:///' + basedir):
            os.makedirs(os.path.join(basedir, 'database'), exist_ok=True)
        db.create_all()

    return app


def get_store() -> VaultStore:
    return current_app.extensions['vault_store']


def toast(t: Toast) -> None:
    g.toast_subject.notify(t)


def reply(body=None, status=200):
    payload = dict(body or {})
    payload['toasts'] = g.toast_collector.to_list()
    return jsonify(payload), status


def serialize(item):
    data = item.to_dict()
    data['createdAtDisplay'] = format_date(item.created_at)
    data['updatedAtDisplay'] = format_date(item.updated_at)
    return data


def _json_body():
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


# Notes

@api.route('/notes', methods=['GET'])
def list_notes():
    return reply({'items': [serialize(n) for n in get_store().get_notes()]})


@api.route('/notes', methods=['POST'])
def create_note():
    body = _json_body()
    title = body.get('title')
    content = body.get('content')
    failure = validate(build_note_chain(), UploadCandidate(title=title, content=content))
    if failure:
        toast(failure)
        return reply({'error': 'invalid'}, 400)
    note = get_store().save_note(title=title, content=content or '')
    toast(Toast('Note created', 'Your note has been saved'))
    return reply({'item': serialize(note)}, 201)


@api.route('/notes/<note_id>', methods=['PUT', 'PATCH'])
def edit_note(note_id):
    body = _json_body()
    changes = {k: body[k] for k in ('title', 'content') if k in body}
    # PATCH may leave the title alone; the content still has to be text
    if 'title' in changes or request.method == 'PUT':
        chain = build_note_chain(editing=True)
    else:
        chain = TextContentHandler()
    failure = validate(chain, UploadCandidate(title=changes.get('title'), content=changes.get('content')))
    if failure:
        toast(failure)
        return reply({'error': 'invalid'}, 400)
    if 'content' in changes and changes['content'] is None:
        changes['content'] = ''
    note = get_store().update_note(note_id, **changes)
    if note is None:
        toast(destructive('Note not found', 'It may already have been deleted'))
        return reply({'error': 'not_found'}, 404)
    toast(Toast('Note updated', 'Your changes have been saved'))
    return reply({'item': serialize(note)})


@api.route('/notes/<note_id>', methods=['DELETE'])
def remove_note(note_id):
    return _delete(ItemType.NOTE, note_id, 'Note')


# Images and PDFs

def _delete(kind, item_id, label):
    collection = get_store().collection(kind)
    existing = next((it for it in collection.get_all() if it.id == item_id), None)
    if not collection.delete(item_id):
        toast(destructive(f'{label} not found', 'It may already have been deleted'))
        return reply({'deleted': False}, 404)
    toast(Toast(f'{label} deleted', f'"{existing.title}" has been deleted' if existing else ''))
    return reply({'deleted': True})


def _label(kind):
    return 'PDF' if kind == ItemType.PDF else 'Image'


@api.route('/<any(images, pdfs):section>', methods=['GET'])
def list_files(section):
    items = get_store().collection(UPLOAD_KINDS[section]).get_all()
    return reply({'items': [serialize(it) for it in items]})


@api.route('/<any(images, pdfs):section>', methods=['POST'])
def upload_file(section):
    kind = UPLOAD_KINDS[section]
    cfg = current_app.config
    upload = request.files.get('file')
    data = b''
    filename = None
    mimetype = None
    if upload is not None and upload.filename:
        filename = upload.filename
        mimetype = upload.mimetype
        data = upload.read()

    # the dialog pre-fills the title with the file name up to its first dot
    title = request.form.get('title')
    if title is None and filename:
        title = filename.split('.')[0]

    candidate = UploadCandidate(title=title or '', filename=filename, mimetype=mimetype, size=len(data))
    if kind == ItemType.PDF:
        chain = build_pdf_chain(cfg['VAULT_MAX_UPLOAD_MB'], cfg['VAULT_MAX_PDF_MB'])
    else:
        chain = build_image_chain(cfg['VAULT_MAX_UPLOAD_MB'])
    failure = validate(chain, candidate)
    if failure:
        toast(failure)
        return reply({'error': 'invalid'}, 400)

    data_url = file_to_data_url(data, mimetype)
    item = get_store().collection(kind).save(title=candidate.title, data_url=data_url)
    label = _label(kind)
    toast(Toast(f'{label} uploaded', f'Your {label if kind == ItemType.PDF else label.lower()} has been saved'))
    return reply({'item': serialize(item)}, 201)


@api.route('/<any(images, pdfs):section>/<item_id>', methods=['DELETE'])
def remove_file(section, item_id):
    kind = UPLOAD_KINDS[section]
    return _delete(kind, item_id, _label(kind))


@api.route('/<any(images, pdfs):section>/<item_id>/raw', methods=['GET'])
def raw_file(section, item_id):
    items = get_store().collection(UPLOAD_KINDS[section]).get_all()
    item = next((it for it in items if it.id == item_id), None)
    if item is None:
        raise NotFound()
    try:
        mimetype, content = parse_data_url(item.data_url)
    except ValueError:
        log.warning('data_url_unreadable', collection=section, item_id=item_id)
        raise NotFound()
    return Response(content, mimetype=mimetype)


# Search

@api.route('/search', methods=['GET'])
def search():
    query = request.args.get('q', '')
    results = get_store().search_items(query)
    return reply({'query': query, 'items': [serialize(it) for it in results]})


@api.route('/search/<any(note, image, pdf):kind>/<item_id>', methods=['GET'])
def select_result(kind, item_id):
    # picking a search hit: hand back the item and the tab it lives in
    item = next((it for it in get_store().collection(kind).get_all() if it.id == item_id), None)
    if item is None:
        raise NotFound()
    toast(Toast(f'Found "{item.title}"', f'View it in the {kind} section'))
    return reply({'tab': kind, 'item': serialize(item)})


if __name__ == '__main__':
    create_app().run(debug=True)
