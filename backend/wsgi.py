from app import create_app

# gunicorn backend.wsgi:app
app = create_app()

@app.route('/')
def index():
    return "RestStop routing backend is running!"

if __name__ == "__main__":
    app.run(host='0.0.0.0', port=8080)
