"""
Command-line interface for NetStorage Python SDK
Runs a single storage action against ``host/path``
"""

import argparse
import logging
import sys
from typing import Optional, List

from . import __version__
from .config import NetStorageConfig
from .exceptions import NetStorageSDKError, ClockSkewError
from .http_client import NetStorageClient
from .signing.types import Credential, SignVersion
from .signing.utils import BUFFER_SIZE

ACTIONS = [
    'delete', 'dir', 'download', 'du', 'mkdir', 'mtime',
    'rename', 'rmdir', 'stat', 'symlink', 'upload',
]

EPILOG = """
Where:
  action      one of: delete, dir, download, du, mkdir, mtime, rename, rmdir, stat, symlink, upload
  user        username defined in the Luna portal
  key         unique key used to sign api requests
  outfile     local file name to write when action=download
  srcfile     local file used as source when action=upload
  target      the absolute path (/1234/example.jpg) pointing to the existing target when action=symlink
  newpath     the absolute path (/1234/example.jpg) for the new file when action=rename
  host/path   the netstorage hostname and path to the file being manipulated (example.akamaihd.net/1234/example.jpg)

Example: netstorage-cms -a dir -u user1 -k 1234abcd example.akamaihd.net/1234
"""


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='netstorage-cms',
        description='Run a NetStorage CMS API action',
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument('--version', action='version', version=f'NetStorage Python SDK {__version__}')
    parser.add_argument('-a', '--action', required=True, choices=ACTIONS, help='Storage action to run')
    parser.add_argument('-u', '--user', required=True, help='Upload account username')
    parser.add_argument('-k', '--key', required=True, help='Upload account key')
    parser.add_argument('-o', '--outfile', help='Write the response body to this file instead of stdout')
    parser.add_argument('-f', '--srcfile', help='Local file to upload (action=upload)')
    parser.add_argument('-t', '--target', help='Existing target path (action=symlink)')
    parser.add_argument('-d', '--newpath', help='New path (action=rename)')
    parser.add_argument('--index-zip', action='store_true', help='Index an uploaded zip archive')
    parser.add_argument('--ssl', action='store_true', help='Use HTTPS')
    parser.add_argument(
        '--sign-version',
        type=int,
        choices=[v.value for v in SignVersion],
        default=SignVersion.HMAC_SHA256.value,
        help='Signature version: 3 (HMAC-MD5), 4 (HMAC-SHA1), 5 (HMAC-SHA256, default)'
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    parser.add_argument('location', metavar='host/path', help='NetStorage hostname and path')

    return parser


def split_location(location: str):
    """Split ``host/path`` into the hostname and an absolute path."""
    host, _, path = location.partition('/')
    return host, '/' + path


def write_stream(stream, outfile: Optional[str]) -> None:
    """Copy a response stream to a file or stdout."""
    with stream:
        if outfile:
            with open(outfile, 'wb') as output:
                for chunk in stream.iter_chunks(BUFFER_SIZE):
                    output.write(chunk)
        else:
            output = sys.stdout.buffer
            for chunk in stream.iter_chunks(BUFFER_SIZE):
                output.write(chunk)
            output.flush()


def run_action(client: NetStorageClient, args: argparse.Namespace, path: str):
    """
    Dispatch the requested action.

    Returns:
        ResponseStream for data-returning actions, otherwise a bool
    """
    action = args.action
    if action == 'delete':
        return client.delete(path)
    if action == 'dir':
        return client.dir(path)
    if action == 'download':
        return client.download(path)
    if action == 'du':
        return client.du(path)
    if action == 'mkdir':
        return client.mkdir(path)
    if action == 'mtime':
        return client.mtime(path)
    if action == 'rename':
        return client.rename(path, args.newpath)
    if action == 'rmdir':
        return client.rmdir(path)
    if action == 'stat':
        return client.stat(path)
    if action == 'symlink':
        return client.symlink(path, args.target)
    if action == 'upload':
        return client.upload_file(path, args.srcfile, index_zip=args.index_zip)
    raise ValueError(f"Unknown action: {action}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    required = {'rename': 'newpath', 'symlink': 'target', 'upload': 'srcfile'}
    if args.action in required and not getattr(args, required[args.action]):
        parser.print_help(sys.stderr)
        return 2

    host, path = split_location(args.location)

    try:
        credential = Credential(hostname=host, username=args.user, key=args.key)
        config = NetStorageConfig(hostname=host, use_ssl=args.ssl, sign_version=args.sign_version)
        client = NetStorageClient(credential, config)

        result = run_action(client, args, path)
        if isinstance(result, bool):
            if result:
                print("Success.")
            else:
                print("Error.", file=sys.stderr)
                return 1
        else:
            write_stream(result, args.outfile)

    except ClockSkewError as e:
        print(f"Error: {e}. Check the system clock.", file=sys.stderr)
        return 1
    except NetStorageSDKError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
