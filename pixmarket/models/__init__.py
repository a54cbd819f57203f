from .db_server_setting import ServerSetting
from .history_models import DBHistory
from .picture_models import DBPicture, PictureState
from .user_models import DBUser
