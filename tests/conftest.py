import pytest

from app import create_app

SALES_CSV = """product,sales,units,date,active
Widget,100.5,10,2024-01-01,yes
Gadget,200,20,2024-01-02,no
Widget,150,15,2024-01-03,yes
Doohickey,175.25,18,2024-01-04,yes
Gizmo,5000,500,2024-01-05,no
Widget,120,12,2024-01-06,yes
"""


@pytest.fixture
def app(tmp_path):
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'test.db'}",
        'UPLOAD_FOLDER': str(tmp_path / 'uploads'),
        'EXPORT_FOLDER': str(tmp_path / 'exports'),
    })
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def sales_csv(tmp_path):
    path = tmp_path / 'sales.csv'
    path.write_text(SALES_CSV, encoding='utf-8')
    return path
