"""Application entry point for Passauth Authentication Service"""
import os

from passauth.app import create_app

app = create_app(os.environ.get('FLASK_CONFIG', 'default'))

if __name__ == "__main__":
    app.run(debug=app.config['DEBUG'], host='0.0.0.0', port=5000)
