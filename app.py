"""
Sign Interpreter — メインアプリケーション
Flask web application for the sign language interpreter capture station.

Architecture: the camera is opened server-side with OpenCV. The page shows
an MJPEG preview, a single start/stop toggle and an interpretation panel
that polls /state.
"""
import logging
import time

from flask import Flask, Response, jsonify, render_template

import config
from modules.camera import CameraSource
from modules.preprocessing import encode_preview_jpeg
from modules.session import InterpreterSession
from modules.vlm import BatchSubmitter, GeminiInterpreter

logger = logging.getLogger(__name__)


def configure_logging(level: str = config.LOG_LEVEL):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)-8s %(name)s %(message)s",
    )


def build_session() -> InterpreterSession:
    camera = CameraSource(config.CAMERA_INDEX)
    submitter = BatchSubmitter(GeminiInterpreter(config.GOOGLE_API_KEY, config.GEMINI_MODEL))
    return InterpreterSession(camera, submitter)


def generate_preview(camera, fps: int = config.PREVIEW_FPS, mirror: bool = config.PREVIEW_MIRROR):
    """カメラ映像を MJPEG として配信する"""
    delay = 1.0 / fps
    while camera.is_open:
        frame = camera.latest_frame()
        if frame is None:
            time.sleep(delay)
            continue
        jpeg = encode_preview_jpeg(frame, mirror=mirror)
        if jpeg is None:
            logger.warning("Failed to encode preview frame")
            time.sleep(delay)
            continue
        yield (b"--frame\r\n"
               b"Content-Type: image/jpeg\r\n\r\n" + jpeg + b"\r\n")
        time.sleep(delay)


def create_app(session: InterpreterSession) -> Flask:
    app = Flask(__name__)
    app.config["SESSION"] = session

    # ── ページルート ──

    @app.route("/")
    def index():
        """メイン画面"""
        return render_template("index.html", state=session.snapshot())

    @app.route("/video_feed")
    def video_feed():
        """ライブプレビュー"""
        if not session.camera_ready:
            return jsonify(session.snapshot()), 503
        return Response(
            generate_preview(session.camera),
            mimetype="multipart/x-mixed-replace; boundary=frame",
        )

    # ── API エンドポイント ──

    @app.route("/state")
    def state():
        return jsonify(session.snapshot())

    @app.route("/start", methods=["POST"])
    def start():
        if not session.start():
            return jsonify(session.snapshot()), 409
        return jsonify(session.snapshot())

    @app.route("/stop", methods=["POST"])
    def stop():
        session.stop()
        return jsonify(session.snapshot())

    @app.route("/toggle", methods=["POST"])
    def toggle():
        """録画の開始／停止を切り替える"""
        if session.toggle() is False:
            return jsonify(session.snapshot()), 409
        return jsonify(session.snapshot())

    @app.route("/camera/retry", methods=["POST"])
    def camera_retry():
        session.open_camera()
        return jsonify(session.snapshot())

    return app


# ── 起動 ──

if __name__ == "__main__":
    configure_logging()
    session = build_session()
    session.open_camera()

    logger.info("Sign Interpreter — http://%s:%s (model %s)",
                config.FLASK_HOST, config.FLASK_PORT, config.GEMINI_MODEL)

    try:
        create_app(session).run(
            host=config.FLASK_HOST,
            port=config.FLASK_PORT,
            debug=config.FLASK_DEBUG,
            threaded=True,
            use_reloader=False,
        )
    finally:
        session.close()
