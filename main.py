from takurabid.main import create_app

app = create_app()
