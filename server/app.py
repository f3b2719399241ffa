"""
SigSync Server - resynchronize declaration signatures over HTTP
"""

import uuid
from datetime import datetime
from typing import Any, Dict

from flask import Flask, request, jsonify

from sigsync import logger
from sigsync.refactorings.change_signature import ChangeDescriptor, DeclarationSite, SignaturePatcher, Visibility
from sigsync.result import PatchStatus
from sigsync.tree import SyntaxTree, DeclarationParser

app = Flask(__name__)
app.config['MAX_CONTENT_LENGTH'] = 1 * 1024 * 1024  # 1MB max request size

# Outcomes of earlier requests, by patch id
results: Dict[str, Dict[str, Any]] = {}


def _bad_request(message: str, status_code: int = 400):
    logger.warning(f"Rejected signature request: {message}")
    return jsonify({'error': message}), status_code


@app.route('/api/visibilities')
def get_visibilities():
    """List the visibilities a descriptor may request"""
    return jsonify([{'id': v.name.lower(), 'keyword': v.keyword} for v in Visibility])


@app.route('/api/signature/apply', methods=['POST'])
def apply_signature():
    """
    Apply a change descriptor to one declaration.

    Body:
        source: Declaration header text, e.g. "fun foo(x: Int): Int"
        descriptor: ChangeDescriptor in dict form
        is_local: Declaration lives inside a function body (optional)
        is_inherited: Declaration overrides the changed one (optional)
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return _bad_request('JSON object body is required')
    if not isinstance(data.get('source'), str):
        return _bad_request('source is required')
    if not isinstance(data.get('descriptor'), dict):
        return _bad_request('descriptor is required')

    logger.debug(f"Received signature request: {data}")

    try:
        descriptor = ChangeDescriptor.from_dict(data['descriptor'])
        tree = SyntaxTree()
        root = DeclarationParser(tree).parse_declaration(data['source'])
        site = DeclarationSite.for_declaration(
            tree, root,
            is_local=bool(data.get('is_local', False)),
            is_inherited=bool(data.get('is_inherited', False))
        )
        result = SignaturePatcher(tree).apply(site, descriptor)
    except (ValueError, KeyError, TypeError) as e:
        return _bad_request(str(e))
    except RuntimeError as e:
        # Descriptor does not match the declaration (e.g. parameter count)
        return _bad_request(str(e), 422)

    patch_id = str(uuid.uuid4())
    response_data = result.to_dict()
    response_data.update({
        'id': patch_id,
        'text': tree.text(root),
        'timestamp': datetime.now().isoformat()
    })
    results[patch_id] = response_data
    logger.info(f"Patch {patch_id}: {result.status.value} - {result.message}")

    status_code = 200 if result.status == PatchStatus.SUCCESS else 409
    return jsonify(response_data), status_code


@app.route('/api/signature/<patch_id>')
def get_patch(patch_id):
    """Get the outcome of an earlier request"""
    if patch_id in results:
        return jsonify(results[patch_id])
    return jsonify({'status': 'not_found'}), 404
