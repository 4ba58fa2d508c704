import azure.functions as func

from routes.video_function import bp as video_bp

app = func.FunctionApp(http_auth_level=func.AuthLevel.ANONYMOUS)
app.register_functions(video_bp)
