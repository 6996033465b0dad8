import os
import uuid
import logging
from flask import request, jsonify, send_file, current_app
from werkzeug.exceptions import RequestEntityTooLarge
from werkzeug.utils import secure_filename
from models import db, UploadedFile
from parsers.file_parser import FileParserFactory, ParseError
from analyzers.spreadsheet_analyzer import SpreadsheetAnalyzer
from analyzers.pattern_analyzer import round_half_up
from reporting.export_utils import ExportUtils

ALLOWED_EXTENSIONS = {'csv', 'xls', 'xlsx'}


def allowed_file(filename):
    """Check if file extension is allowed"""
    return '.' in filename and \
           filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def error_response(message, status_code, **extra):
    body = {'status': 'error', 'message': message}
    body.update(extra)
    return jsonify(body), status_code


def register_routes(app):
    """Register all routes with the Flask app"""

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(e):
        limit_mb = current_app.config['MAX_CONTENT_LENGTH'] // (1024 * 1024)
        return error_response(f'Upload too large. Maximum request size is {limit_mb}MB.', 413)

    @app.route('/api/uploads')
    def api_get_uploads():
        """Get recent uploads, newest first"""
        limit = request.args.get('limit', 20, type=int)
        uploads = UploadedFile.query.order_by(
            UploadedFile.uploaded_at.desc(), UploadedFile.id.desc()
        ).limit(max(limit, 1)).all()

        return jsonify({
            'status': 'success',
            'uploads': [upload.to_dict() for upload in uploads]
        })

    @app.route('/api/upload', methods=['POST'])
    def api_upload_files():
        """API endpoint for file upload and analysis"""
        files = request.files.getlist('files[]') or request.files.getlist('file')

        if not files or all(file.filename == '' for file in files):
            return error_response('No files selected', 400)

        uploaded = []
        invalid_files = []
        saved_paths = []
        max_file_size = current_app.config['MAX_FILE_SIZE']

        try:
            for file in files:
                if not (file and file.filename and allowed_file(secure_filename(file.filename))):
                    invalid_files.append({
                        'filename': file.filename,
                        'error': 'Invalid file type. Please upload Excel (.xlsx, .xls) or CSV files only.'
                    })
                    continue

                filename = secure_filename(file.filename)
                file_path = os.path.join(current_app.config['UPLOAD_FOLDER'], f"{uuid.uuid4().hex[:12]}_{filename}")
                file.save(file_path)
                saved_paths.append(file_path)

                file_size = os.path.getsize(file_path)
                if file_size > max_file_size:
                    os.remove(file_path)
                    invalid_files.append({
                        'filename': file.filename,
                        'error': f'File too large. Maximum size is {max_file_size // (1024 * 1024)}MB.'
                    })
                    continue

                uploaded_file = UploadedFile(
                    filename=filename,
                    file_type=filename.rsplit('.', 1)[1].lower(),
                    file_path=file_path,
                    file_size=file_size
                )
                db.session.add(uploaded_file)

                try:
                    analyze_uploaded_file(uploaded_file)
                except ParseError as e:
                    logging.warning(f"Could not analyze {filename}: {str(e)}")
                    uploaded_file.set_error(str(e))
                except Exception as e:
                    logging.error(f"Analysis error for {filename}: {str(e)}")
                    uploaded_file.set_error(f'Analysis failed: {str(e)}')

                uploaded.append(uploaded_file)

            db.session.commit()

        except Exception as e:
            db.session.rollback()
            logging.error(f"Upload error: {str(e)}")
            # Nothing was recorded, so drop what this request stored
            for path in saved_paths:
                if os.path.exists(path):
                    os.remove(path)
            return error_response(f'Upload failed: {str(e)}', 500)

        if not uploaded:
            return error_response('No valid files were uploaded', 400, invalid_files=invalid_files)

        return jsonify({
            'status': 'success',
            'message': f'Successfully uploaded {len(uploaded)} files',
            'uploaded_files': [upload_preview(f) for f in uploaded],
            'invalid_files': invalid_files
        })

    @app.route('/api/uploads/<int:file_id>')
    def api_get_upload(file_id):
        """API endpoint to get an upload record and its summary"""
        uploaded_file = db.session.get(UploadedFile, file_id)

        if not uploaded_file:
            return error_response('File not found', 404)

        return jsonify({
            'status': 'success',
            'file': upload_preview(uploaded_file)
        })

    @app.route('/api/analytics/<int:file_id>')
    def api_get_analytics(file_id):
        """API endpoint to get the full stored analysis of a file"""
        uploaded_file = db.session.get(UploadedFile, file_id)

        if not uploaded_file:
            return error_response('File not found', 404)

        if uploaded_file.status != 'completed':
            return error_response(uploaded_file.error_message or 'File has not been analyzed', 422)

        return jsonify({
            'status': 'success',
            'file': uploaded_file.to_dict(),
            'results': uploaded_file.get_results()
        })

    @app.route('/api/analyze/<int:file_id>', methods=['POST'])
    def api_analyze_file(file_id):
        """API endpoint to re-run analysis on a stored file"""
        uploaded_file = db.session.get(UploadedFile, file_id)

        if not uploaded_file:
            return error_response('File not found', 404)

        try:
            analyze_uploaded_file(uploaded_file)
            db.session.commit()

        except ParseError as e:
            uploaded_file.set_error(str(e))
            db.session.commit()
            return error_response(str(e), 422)

        except Exception as e:
            db.session.rollback()
            logging.error(f"Analysis error: {str(e)}")
            return error_response(f'Analysis failed: {str(e)}', 500)

        return jsonify({
            'status': 'success',
            'message': 'Analysis completed successfully',
            'file': uploaded_file.to_dict(),
            'results': uploaded_file.get_results()
        })

    @app.route('/api/export/<int:file_id>/<format>')
    def api_export_results(file_id, format):
        """API endpoint for export analysis results"""
        uploaded_file = db.session.get(UploadedFile, file_id)

        if not uploaded_file:
            return error_response('File not found', 404)

        results = uploaded_file.get_results()

        if not results:
            return error_response('No analysis results to export', 400)

        if format.lower() not in ExportUtils.formats:
            return error_response(f'Unsupported export format: {format}', 400)

        try:
            export_utils = ExportUtils(current_app.config['EXPORT_FOLDER'])
            name = os.path.splitext(uploaded_file.filename)[0] + '_analysis'
            file_path = export_utils.export(results, format, name)
            return send_file(os.path.abspath(file_path), as_attachment=True)

        except Exception as e:
            logging.error(f"Export error: {str(e)}")
            return error_response(f'Export failed: {str(e)}', 500)

    @app.route('/api/uploads/<int:file_id>', methods=['DELETE'])
    def api_delete_upload(file_id):
        """API endpoint to delete an upload and its stored file"""
        uploaded_file = db.session.get(UploadedFile, file_id)

        if not uploaded_file:
            return error_response('File not found', 404)

        try:
            if os.path.exists(uploaded_file.file_path):
                os.remove(uploaded_file.file_path)

            filename = uploaded_file.filename
            db.session.delete(uploaded_file)
            db.session.commit()

            return jsonify({
                'status': 'success',
                'message': 'File deleted successfully',
                'filename': filename
            })

        except Exception as e:
            db.session.rollback()
            logging.error(f"Delete error: {str(e)}")
            return error_response(f'Delete failed: {str(e)}', 500)

    @app.route('/api/dashboard')
    def api_dashboard():
        """Totals across the upload history"""
        uploads = UploadedFile.query.order_by(
            UploadedFile.uploaded_at.desc(), UploadedFile.id.desc()
        ).all()

        return jsonify({
            'status': 'success',
            'dashboard': generate_dashboard_summary(uploads)
        })


def analyze_uploaded_file(uploaded_file):
    """Parse a stored file and attach a fresh analysis to its record"""
    logging.info(f"Parsing file: {uploaded_file.filename}")
    parser = FileParserFactory().get_parser(uploaded_file.file_type)
    data = parser.parse(uploaded_file.file_path)

    if data is None or len(data.columns) == 0:
        raise ParseError('The file appears to be empty.')

    config = current_app.config
    analyzer = SpreadsheetAnalyzer(
        sample_size=config['TYPE_SAMPLE_SIZE'],
        histogram_bins=config['HISTOGRAM_BINS'],
        preview_rows=config['PREVIEW_ROWS']
    )
    uploaded_file.set_results(analyzer.analyze(data))


def upload_preview(uploaded_file):
    """Upload record plus the parts of its analysis shown right after upload"""
    preview = uploaded_file.to_dict()
    results = uploaded_file.get_results()
    preview['summary'] = results.get('summary', {})
    preview['sample_data'] = results.get('sample_data', [])
    return preview


def generate_dashboard_summary(uploads):
    """Generate totals for the dashboard"""
    completed = [upload for upload in uploads if upload.status == 'completed']

    column_types = {'numeric_columns': 0, 'date_columns': 0, 'boolean_columns': 0, 'text_columns': 0}
    for upload in completed:
        summary = upload.get_results().get('summary', {})
        for key in column_types:
            column_types[key] += summary.get(key, 0)

    return {
        'total_files': len(uploads),
        'completed_files': len(completed),
        'failed_files': len(uploads) - len(completed),
        'total_rows': sum(upload.row_count or 0 for upload in completed),
        'average_quality': round_half_up(sum(upload.data_quality or 0 for upload in completed) / len(completed)) if completed else 0,
        'column_types': column_types,
        'latest_upload': uploads[0].to_dict() if uploads else None
    }
