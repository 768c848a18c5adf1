import os
import tempfile

# ログファイルを ~/.pagetodo に書かないように、import 前に差し替える
os.environ.setdefault("PT_HOME_DIR", tempfile.mkdtemp(prefix="pagetodo-test-"))
