from datetime import datetime, timezone
import json

from flask_sqlalchemy import SQLAlchemy

from reporting.json_utils import make_json_serializable

db = SQLAlchemy()


def _utcnow():
    return datetime.now(timezone.utc)


class UploadedFile(db.Model):
    """Upload history entry with the stored analysis of the file"""
    id = db.Column(db.Integer, primary_key=True)
    filename = db.Column(db.String(255), nullable=False)
    file_type = db.Column(db.String(10), nullable=False)
    file_path = db.Column(db.String(500), nullable=False)
    file_size = db.Column(db.Integer)
    uploaded_at = db.Column(db.DateTime, default=_utcnow)
    status = db.Column(db.String(20), nullable=False, default='completed')
    error_message = db.Column(db.Text)
    row_count = db.Column(db.Integer, default=0)
    column_count = db.Column(db.Integer, default=0)
    data_quality = db.Column(db.Integer, default=0)
    analysis_results = db.Column(db.Text)  # JSON string of results

    def set_results(self, results_dict):
        """Store analysis results as JSON and copy the headline numbers"""
        serializable_results = make_json_serializable(results_dict)
        self.analysis_results = json.dumps(serializable_results)

        summary = serializable_results.get('summary', {})
        self.row_count = summary.get('total_rows', 0)
        self.column_count = summary.get('total_columns', 0)
        self.data_quality = summary.get('data_quality', 0)
        self.status = 'completed'
        self.error_message = None

    def set_error(self, message):
        self.status = 'error'
        self.error_message = message
        self.analysis_results = None

    def get_results(self):
        """Retrieve analysis results as dictionary"""
        if self.analysis_results:
            return json.loads(self.analysis_results)
        return {}

    @property
    def size_label(self):
        return f"{(self.file_size or 0) / (1024 * 1024):.1f} MB"

    def to_dict(self):
        return {
            'id': self.id,
            'filename': self.filename,
            'file_type': self.file_type,
            'file_size': self.file_size,
            'size_label': self.size_label,
            'uploaded_at': self.uploaded_at.isoformat() if self.uploaded_at else None,
            'status': self.status,
            'error': self.error_message,
            'rows': self.row_count,
            'columns': self.column_count,
            'data_quality': self.data_quality,
            'data_types': self.get_results().get('data_types', {}),
        }
