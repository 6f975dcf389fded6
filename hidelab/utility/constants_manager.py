
import os

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field

from hidelab.services.steganography.core.matrix import DEFAULT_SEED


class ServerConfig(BaseModel):
    host: str = "127.0.0.1"
    port: int = Field(default=8080, ge=1, le=65535)
    upload_dir: str = "./tmp"
    max_image_bytes: int = Field(default=10 * 1024 * 1024, gt=0)
    max_message_bytes: int = Field(default=1024 * 1024, gt=0)
    seed: int = Field(default=DEFAULT_SEED, ge=0)


class ConstantsManager:
    _dotenv_loaded = False

    def __init__(self):
        if not ConstantsManager._dotenv_loaded:
            load_dotenv(dotenv_path=find_dotenv(usecwd=True), override=False)
            ConstantsManager._dotenv_loaded = True

    def get_variable(self, variableName, default=None):
        variable = os.environ.get(variableName, "")
        if variable == "":
            if default is not None:
                return default
            raise Exception(f"Could not find {variableName} environment variable")
        return variable

    def get_host(self):
        return self.get_variable('HIDE_HOST', ServerConfig.model_fields['host'].default)

    def get_port(self):
        return int(self.get_variable('HIDE_PORT', ServerConfig.model_fields['port'].default))

    def get_upload_dir(self):
        return self.get_variable('HIDE_UPLOAD_DIR', ServerConfig.model_fields['upload_dir'].default)

    def get_max_image_bytes(self):
        return int(self.get_variable('HIDE_MAX_IMAGE_BYTES', ServerConfig.model_fields['max_image_bytes'].default))

    def get_max_message_bytes(self):
        return int(self.get_variable('HIDE_MAX_MESSAGE_BYTES', ServerConfig.model_fields['max_message_bytes'].default))

    def get_seed(self):
        return int(str(self.get_variable('HIDE_SEED', DEFAULT_SEED)), 0)

    def load_server_config(self) -> ServerConfig:
        return ServerConfig(
            host=self.get_host(),
            port=self.get_port(),
            upload_dir=self.get_upload_dir(),
            max_image_bytes=self.get_max_image_bytes(),
            max_message_bytes=self.get_max_message_bytes(),
            seed=self.get_seed(),
        )
