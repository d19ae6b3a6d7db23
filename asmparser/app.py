# asmparser/app.py
import re
import logging

from flask import Flask, request, jsonify
from flask_cors import CORS

from asmparser.asm_parser import Assembler

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    "CORS_ORIGINS": "http://localhost:3000",
    "LOG_LEVEL": "INFO",
    "PORT": 5001,
}

ENCODING_RE = re.compile(r'[01]{32}')

app = Flask(__name__)
app.config.from_mapping(DEFAULT_CONFIG)
# e.g. MIPSASM_CORS_ORIGINS, MIPSASM_PORT
app.config.from_prefixed_env("MIPSASM")
CORS(app, resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}})

# Last program assembled without errors, for encoding lookups
last_program = None


@app.route('/')
def index():
    return "MIPS Assembler Backend is running!"


@app.route('/api/ping', methods=['GET'])
def ping():
    logger.debug("Ping endpoint called")
    return jsonify({"message": "pong"})


@app.route('/api/assemble', methods=['POST'])
def handle_assemble():
    global last_program
    try:
        data = request.get_json(silent=True)
        if not data or 'assembly' not in data or not isinstance(data['assembly'], str):
            return jsonify({"errors": [{"message": "Missing 'assembly' key in request."}]}), 400
        assembly_code = data['assembly']
        logger.debug(f"Received assembly: {assembly_code[:100]}...")
        program = Assembler(assembly_code)
        if program.is_format_correct():
            last_program = program
            logger.debug(f"Assembly successful. Code length: {len(program)}")
        else:
            logger.warning(f"Assembly failed: {program.errors}")
        return jsonify(program.to_dict())
    except Exception as e:
        logger.error(f"Error during assembly: {e}", exc_info=True)
        return jsonify({"errors": [{"message": f"Internal server error during assembly: {e}"}]}), 500


@app.route('/api/assembly-line', methods=['POST'])
def handle_assembly_line():
    """Looks up the source line that produced a 32-bit encoding."""
    try:
        data = request.get_json(silent=True)
        encoding = data.get('encoding') if isinstance(data, dict) else None
        if not isinstance(encoding, str) or not ENCODING_RE.fullmatch(encoding):
            return jsonify({"error": "Missing/invalid 'encoding' key (must be a 32-character binary string)."}), 400
        if last_program is None:
            return jsonify({"error": "No program has been assembled yet."}), 404
        assembly_line = last_program.get_assembly_line(encoding)
        if assembly_line is None:
            return jsonify({"error": f"No instruction encodes to {encoding}."}), 404
        return jsonify({"encoding": encoding, "assembly": assembly_line})
    except Exception as e:
        logger.error(f"Error during assembly line lookup: {e}", exc_info=True)
        return jsonify({"error": f"Internal server error during lookup: {e}"}), 500


if __name__ == '__main__':
    # Run with `python -m asmparser.app` from the project root
    logging.basicConfig(level=app.config["LOG_LEVEL"])
    app.run(debug=False, port=int(app.config["PORT"]))
