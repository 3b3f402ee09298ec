from dotenv import load_dotenv, find_dotenv
import os

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

    def get_int_variable(self, variableName, default=None):
        variable = self.get_variable(variableName, default)
        try:
            return int(variable)
        except (TypeError, ValueError):
            raise Exception(f"{variableName} must be an integer, got {variable!r}")

    def get_kdf_iterations(self):
        return self.get_int_variable('STEGO_KDF_ITERATIONS', 100000)

    def get_max_file_size(self):
        return self.get_int_variable('STEGO_MAX_FILE_SIZE', 10485760)

    def get_max_pixels(self):
        return self.get_int_variable('STEGO_MAX_PIXELS', 40000000)

    def get_output_dir(self):
        return self.get_variable('STEGO_OUTPUT_DIR', './stego')

    def get_log_level(self):
        return self.get_variable('LOG_LEVEL', 'INFO').upper()

    def get_service_name(self):
        return self.get_variable('SERVICE_NAME', 'capn-stego')
