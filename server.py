#!/usr/bin/env python3

import hmac
import logging
import time
from datetime import datetime, timezone
from functools import wraps
from mimetypes import guess_type
from os import makedirs, path, remove
from time import sleep

from bottle import Bottle

import settings
from attachment_db import AttachmentDb
from switch_db import SwitchDb
from thumbswitch import ajax, storage_paths
from thumbswitch.attachment_metadata import MetadataGenerator
from thumbswitch.errors import TokenException
from thumbswitch.regenerator import Regenerator
from thumbswitch.size_filter import SizeFilter
from thumbswitch.size_registry import SizeRegistry
from thumbswitch.thumbnail_generator import ThumbnailGenerator

app = application = Bottle()

# Configure logging
level = logging.getLevelName(settings.LOG_LEVEL)
logging.basicConfig(filename='app.log', level=level)

from bottle import (
    Response, BaseRequest, request, response, static_file, abort,
    HTTPResponse)

BaseRequest.MEMFILE_MAX = 300 * 1024 * 1024

switch_db = SwitchDb()
attachment_db = AttachmentDb()
registry = SizeRegistry.from_settings(switch_db)
size_filter = SizeFilter(switch_db)
metadata_generator = MetadataGenerator(
    registry,
    size_filter,
    ThumbnailGenerator(quality=settings.JPEG_QUALITY)
)
regenerator = Regenerator(
    attachment_db,
    metadata_generator,
    base_dir=settings.BASE_DIR,
    per_page=settings.REGENERATE_PER_PAGE
)


def log(msg):
    logging.debug(msg)


def generate_token(timestamp, filename):
    """Generate the auth token for the given filename and timestamp.
    This is for comparing to the client submitted token.
    """
    timestamp = str(timestamp)
    if filename is None:
        log("Missing filename, token generation failure.")
        filename = ''
    mac = hmac.new(settings.KEY.encode(), timestamp.encode() + filename.encode(), digestmod='md5')
    return ':'.join((mac.hexdigest(), timestamp))


def get_timestamp():
    """Return an integer timestamp with one second resolution for
    the current moment.
    """
    return int(time.time())


def validate_token(token_in, filename):
    """Validate the input token for given filename using the secret key
    in settings. Checks that the token is within the time tolerance and
    is valid.
    """
    if settings.KEY is None:
        return
    if token_in == '':
        raise TokenException("Auth token is missing.")
    if ':' not in token_in:
        raise TokenException("Auth token is malformed.")

    mac_in, timestr = token_in.split(':', 1)
    try:
        timestamp = int(timestr)
    except ValueError:
        raise TokenException("Auth token is malformed.")

    if settings.TIME_TOLERANCE is not None:
        current_time = get_timestamp()
        if not abs(current_time - timestamp) < settings.TIME_TOLERANCE:
            raise TokenException("Auth token timestamp out of range: %s vs %s" % (timestamp, current_time))

    if not hmac.compare_digest(token_in, generate_token(timestamp, filename)):
        raise TokenException("Auth token is invalid.")
    log(f"Valid token: {token_in} time: {timestr}")


def require_token(filename_param, always=False):
    """Decorate a view function to require an auth token to be present for access.
    filename_param defines the field in the request that contains the value
    the token is signed over.
    If REQUIRE_KEY_FOR_GET is False, validation will be skipped for GET and HEAD
    requests.
    """
    def decorator(func):
        @include_timestamp
        @wraps(func)
        def wrapper(*args, **kwargs):
            if always or request.method not in ('GET', 'HEAD') or settings.REQUIRE_KEY_FOR_GET:
                params = request.forms if request.method == 'POST' else request.query
                try:
                    validate_token(params.token, params.get(filename_param))
                except TokenException as e:
                    response.content_type = 'text/plain; charset=utf-8'
                    response.status = 403
                    response.body = f"403 - forbidden. {e}"
                    log(response.body)
                    return response
            return func(*args, **kwargs)
        return wrapper
    return decorator


def include_timestamp(func):
    """Decorate a view function to include the X-Timestamp header to help clients
    maintain time synchronization.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        result = func(*args, **kwargs)
        (result if isinstance(result, Response) else response) \
            .set_header('X-Timestamp', str(get_timestamp()))
        return result
    return wrapper


def allow_cross_origin(func):
    """Decorate a view function to allow cross domain access."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            result = func(*args, **kwargs)
        except HTTPResponse as r:
            r.set_header('Access-Control-Allow-Origin', '*')
            raise
        (result if isinstance(result, Response) else response) \
            .set_header('Access-Control-Allow-Origin', '*')
        return result
    return wrapper


@app.route('/static/<path:path>')
def static(path):
    """Serve originals and generated sizes."""
    if not settings.ALLOW_STATIC_FILE_ACCESS:
        abort(404)
    return static_file(path, root=settings.BASE_DIR)


@app.route('/sizes')
@allow_cross_origin
@require_token('action')
def sizes():
    """Sizes grouped by origin plus the current switches."""
    return ajax.page_data(switch_db, registry)


@app.route('/ajax/save_settings', method='POST')
@require_token('action')
def save_settings():
    return ajax.save_settings(switch_db, registry, request.forms)


@app.route('/ajax/regenerate_thumbnails', method='POST')
@require_token('action')
def regenerate_thumbnails():
    log(f"Regenerate batch {request.forms.get('batch')}")
    return ajax.regenerate_thumbnails(regenerator, request.forms)


@app.route('/fileupload', method='OPTIONS')
@allow_cross_origin
def fileupload_options():
    response.content_type = "text/plain; charset=utf-8"
    return ''


@app.route('/fileupload', method='POST')
@allow_cross_origin
@require_token('store')
def fileupload():
    """Accept an original upload, store it and generate its enabled sizes."""
    start_save = time.time()
    storename = request.forms.store

    # Basic validation
    if len(storename) < 7 or path.basename(storename) != storename:
        log(f"Bad store name: {storename}")
        abort(400, f"Bad store name: {storename!r}")
    if not request.files:
        abort(400, "No file uploaded")

    pathname = storage_paths.attached_file(storename, settings.BASE_DIR)
    if path.isfile(pathname) or attachment_db.get_attachment_by_internal_filename(storename):
        log("Duplicate file detected; returning 409")
        abort(409, f"Duplicate file: {storename}")

    upload = list(request.files.values())[0]
    makedirs(path.dirname(pathname), exist_ok=True)
    upload.save(pathname, overwrite=True)

    mimetype, _ = guess_type(storename)
    mimetype = mimetype or 'application/octet-stream'
    original_filename = request.forms.get('original_filename') or upload.raw_filename

    attachment_id = attachment_db.create_attachment_record(
        original_filename,
        storename,
        mimetype,
        datetime.now(timezone.utc)
    )

    metadata = None
    if mimetype in settings.CAN_THUMBNAIL:
        try:
            metadata = metadata_generator.generate_attachment_metadata(
                pathname,
                storage_paths.thumbnail_dir(storename, settings.BASE_DIR)
            )
        except (OSError, ValueError) as e:
            logging.error(f"Could not generate sizes for {storename}: {e}")
            attachment_db.delete_attachment_record(attachment_id)
            remove(pathname)
            abort(400, f"Unreadable image: {storename}")
        attachment_db.update_attachment_metadata(attachment_id, metadata)

    log(f"Upload complete: {original_filename} stored as {storename} "
        f"in {time.time() - start_save:.2f}s")
    return {'id': attachment_id, 'metadata': metadata}


@app.route('/testkey')
@require_token('random', always=True)
def testkey():
    """If access to this resource succeeds, clients can conclude
    that they have a valid access key.
    """
    response.content_type = 'text/plain; charset=utf-8'
    return 'Ok.'


@app.route('/')
def main_page():
    log("Hit root")
    return 'Thumbnail switch server'


if __name__ == '__main__':
    from bottle import run
    log("Starting up....")
    while switch_db.connect() is not True:
        sleep(5)
        log("Retrying db connection....")
    switch_db.activate()
    attachment_db.create_tables()
    log("running server...")

    run(app=application,
        host='0.0.0.0',
        port=settings.PORT,
        server=settings.SERVER,
        debug=settings.DEBUG_APP,
        reloader=settings.DEBUG_APP
    )

    log("Exiting.")
