from roadmap import create_app

app = create_app()
