import argparse
import json
import os
import sys
from urllib.parse import urljoin

import requests

_BS_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir, 'backend-services'))
if _BS_DIR not in sys.path:
    sys.path.insert(0, _BS_DIR)

def base_url() -> str:
    return os.getenv('BASE_URL', 'http://localhost:8787').rstrip('/') + '/'

def _headers(headers: dict | None = None) -> dict:
    out = {'Accept': 'application/json'}
    if headers:
        out.update(headers)
    return out

def _parse_header(raw: str) -> tuple[str, str]:
    name, sep, value = raw.partition('=')
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f'expected NAME=VALUE, got {raw!r}')
    return name.strip(), value

def _print_response(r: requests.Response) -> None:
    print(f'HTTP {r.status_code}')
    try:
        print(json.dumps(r.json(), indent=2))
    except ValueError:
        print(r.text)

def do_lint(args) -> int:
    from services.endpoint_service import EndpointService
    from utils.config_util import ConfigurationError, load_config
    from utils.error_codes import ErrorCode

    try:
        config = load_config(args.file)
    except ConfigurationError as e:
        print(f'{ErrorCode.CFG_INVALID}: {e}')
        return 1
    print(f'{len(config.restified_endpoints)} endpoint(s), secret headers: {", ".join(sorted(config.headers))}')
    overlaps = EndpointService.find_overlapping_endpoints(config.restified_endpoints)
    for earlier, later in overlaps:
        print(f'overlap: {later.path} {sorted(later.methods)} is shadowed by {earlier.path} {sorted(earlier.methods)}')
    return 1 if overlaps and args.strict else 0

def do_health(sess: requests.Session, args) -> int:
    r = sess.get(urljoin(base_url(), 'health'), headers=_headers())
    _print_response(r)
    return 0 if r.status_code == 200 else 1

def do_translate(sess: requests.Session, args) -> int:
    payload = {'path': args.path, 'method': args.method}
    if args.query:
        payload['query'] = args.query
    if args.body:
        payload['body'] = json.loads(args.body)
    headers = dict(args.header or [])
    if args.secret:
        headers[args.secret_header] = args.secret
    r = sess.post(base_url(), json=payload, headers=_headers(headers))
    _print_response(r)
    return 0 if r.status_code == 200 else 1

def main():
    p = argparse.ArgumentParser(description='RESTified gateway CLI')
    p.add_argument('--base-url', default=os.getenv('BASE_URL'), help='Override base URL (default env BASE_URL or http://localhost:8787)')
    sub = p.add_subparsers(dest='cmd', required=True)

    ln = sub.add_parser('lint', help='Validate a configuration file and report overlapping endpoints')
    ln.add_argument('file')
    ln.add_argument('--strict', action='store_true', help='Exit non-zero when endpoints overlap')

    sub.add_parser('health', help='Check gateway liveness')

    tr = sub.add_parser('translate', help='Send one RESTified request through the gateway')
    tr.add_argument('path', help='REST path, e.g. /v1/api/rest/albums/10')
    tr.add_argument('--method', default='GET', choices=['GET', 'POST', 'PUT', 'DELETE'])
    tr.add_argument('--query', help='Query string, e.g. limit=5&offset=10')
    tr.add_argument('--body', help='JSON object merged into the variables')
    tr.add_argument('--header', action='append', type=_parse_header, help='Extra header NAME=VALUE (repeatable)')
    tr.add_argument('--secret-header', default='hasura-m-auth')
    tr.add_argument('--secret', default=os.getenv('RESTIFIED_SECRET'), help='Shared secret (default env RESTIFIED_SECRET)')

    args = p.parse_args()
    if args.base_url:
        os.environ['BASE_URL'] = args.base_url

    if args.cmd == 'lint':
        return do_lint(args)

    sess = requests.Session()
    if args.cmd == 'health':
        return do_health(sess, args)
    elif args.cmd == 'translate':
        return do_translate(sess, args)
    else:
        p.print_help()
        return 2

if __name__ == '__main__':
    sys.exit(main())
