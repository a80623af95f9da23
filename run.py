import logging
import os

from farm_records import create_app
from farm_records.extensions import db

logging.basicConfig(format='%(asctime)s %(levelname)s %(name)s: %(message)s')

app = create_app(os.environ.get('FARM_RECORDS_CONFIG', 'dev'))

if __name__ == '__main__':
    with app.app_context():
        db.create_all()
    app.run(debug=True)
