#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Backend API Server for the Cube Cipher
Exposes encrypt/decrypt over HTTP using the algorithm from cube_cipher.py
"""
from flask import Flask, request, jsonify
from flask_cors import CORS
from dotenv import load_dotenv
import os

from cube_cipher import (
    CipherError,
    CubeCipher,
    DEFAULT_KEY_LENGTH,
    generate_key,
    parse_key,
)
from cube_moves import get_move_table

# Load environment variables from .env file if it exists
load_dotenv()

app = Flask(__name__)
CORS(app)

# Debug mode - set via environment variable
DEBUG_MODE = os.environ.get('DEBUG', 'false').lower() == 'true'

# Number of moves in a generated key
KEY_LENGTH = int(os.environ.get('CUBE_KEY_LENGTH', str(DEFAULT_KEY_LENGTH)))

# Reject unknown move names instead of skipping them
STRICT_MOVES = os.environ.get('CUBE_STRICT_MOVES', 'true').lower() == 'true'

MAX_KEY_LENGTH = 1000

cipher = CubeCipher(strict=STRICT_MOVES)


def _error(e: Exception, status: int):
    return jsonify({'error': str(e), 'type': type(e).__name__}), status

def _key_from_request(data):
    """Key from the request body, or a freshly generated one if absent."""
    key = data.get('key')
    if key is None or key == '' or key == []:
        return generate_key(KEY_LENGTH, cipher.table)
    if not isinstance(key, (str, list)):
        raise CipherError('key must be a list of moves or a string')
    return parse_key(key)

# ============================================================================
# API ENDPOINTS
# ============================================================================

@app.route('/api/encrypt', methods=['POST'])
def encrypt_message():
    """
    Encrypt a message with a move key.

    Request body:
        {
            "text": "HELLO",
            "key": ["U", "R'", "F2"]   # optional, also "U R' F2"; random if missing
        }

    Response:
        {
            "ciphertext": "<54 chars>|<base64 metadata>",
            "key": ["U", "R'", "F2"],
            "length": 5
        }
    """
    try:
        data = request.get_json(silent=True)

        if data is None:
            return jsonify({'error': 'No JSON data provided'}), 400

        text = data.get('text')
        if not isinstance(text, str):
            return jsonify({'error': 'No text provided'}), 400

        key = _key_from_request(data)

        if DEBUG_MODE:
            print(f"DEBUG: Encrypting text='{text[:20]}...' with key={' '.join(key)}")

        ciphertext = cipher.encrypt(text, key)

        if DEBUG_MODE:
            print(f"DEBUG: Encrypted result: '{ciphertext}'")

        return jsonify({
            'ciphertext': ciphertext,
            'key': key,
            'length': len(text)
        })

    except CipherError as e:
        return _error(e, 400)
    except Exception as e:
        import traceback
        traceback.print_exc()
        return _error(e, 500)

@app.route('/api/decrypt', methods=['POST'])
def decrypt_message():
    """
    Decrypt a ciphertext. The key travels inside the ciphertext.

    Request body:
        {
            "ciphertext": "<54 chars>|<base64 metadata>"
        }

    Response:
        {
            "decrypted": "HELLO",
            "key": ["U", "R'", "F2"],
            "length": 5
        }
    """
    try:
        data = request.get_json(silent=True)

        if data is None:
            return jsonify({'error': 'No JSON data provided'}), 400

        ciphertext = data.get('ciphertext')
        if not ciphertext or not isinstance(ciphertext, str):
            return jsonify({'error': 'No ciphertext provided'}), 400

        decrypted = cipher.decrypt(ciphertext)
        info = cipher.inspect(ciphertext)

        return jsonify({
            'decrypted': decrypted,
            'key': info['key'],
            'length': info['length']
        })

    except CipherError as e:
        if DEBUG_MODE:
            print(f"DEBUG: Decrypt rejected: {e}")
        return _error(e, 400)
    except Exception as e:
        import traceback
        traceback.print_exc()
        return _error(e, 500)

@app.route('/api/key', methods=['POST'])
def new_key():
    """
    Generate a random key.

    Request body (optional):
        {
            "length": 6
        }
    """
    data = request.get_json(silent=True) or {}
    length = data.get('length', KEY_LENGTH)
    try:
        length = int(length)
    except (ValueError, TypeError):
        return jsonify({'error': 'length must be an integer'}), 400
    if not 0 <= length <= MAX_KEY_LENGTH:
        return jsonify({'error': f'length must be between 0 and {MAX_KEY_LENGTH}'}), 400

    return jsonify({'key': generate_key(length, cipher.table)})

@app.route('/api/moves', methods=['GET'])
def get_moves():
    """Forward and inverse permutation for every move."""
    table = get_move_table()
    return jsonify({
        'seed': table.seed,
        'size': table.size,
        'moves': table.as_dict()
    })

@app.route('/api/test', methods=['POST'])
def test_encryption():
    """
    Test endpoint to verify the round trip works.
    Useful for debugging and verification.
    """
    try:
        data = request.get_json(silent=True) or {}
        test_text = data.get('text', 'HELLO')
        if not isinstance(test_text, str):
            return jsonify({'error': 'text must be a string'}), 400
        key = _key_from_request(data)

        encrypted = cipher.encrypt(test_text, key)
        decrypted = cipher.decrypt(encrypted)

        if DEBUG_MODE:
            print(f"DEBUG TEST: '{test_text}' -> '{encrypted}' -> '{decrypted}'")

        return jsonify({
            'original': test_text,
            'key': key,
            'encrypted': encrypted,
            'decrypted': decrypted,
            'algorithm': 'cube_permutation_cipher',
            'roundtrip_success': test_text == decrypted
        })

    except CipherError as e:
        return _error(e, 400)
    except Exception as e:
        import traceback
        traceback.print_exc()
        return _error(e, 500)

@app.route('/api', methods=['GET'])
def api_info():
    """API information endpoint"""
    return jsonify({
        'service': 'cube-cipher-api',
        'status': 'running',
        'endpoints': {
            'encrypt': '/api/encrypt (POST)',
            'decrypt': '/api/decrypt (POST)',
            'key': '/api/key (POST)',
            'moves': '/api/moves (GET)',
            'test': '/api/test (POST)',
            'health': '/api/health (GET)'
        }
    })

@app.route('/api/health', methods=['GET'])
def health_check():
    """Health check endpoint"""
    return jsonify({
        'status': 'healthy',
        'service': 'cube-cipher-api'
    })

if __name__ == '__main__':
    # Configuration
    # Default to 5001 to avoid macOS AirPlay Receiver conflict on port 5000
    port = int(os.environ.get('PORT', 5001))
    host = os.environ.get('HOST', '0.0.0.0')

    print(f"Starting Cube Cipher API on {host}:{port}")
    print(f"Debug mode: {DEBUG_MODE}")
    print(f"Strict moves: {STRICT_MOVES}")
    print(f"API endpoint: http://{host}:{port}/api/encrypt")

    app.run(host=host, port=port, debug=DEBUG_MODE)
