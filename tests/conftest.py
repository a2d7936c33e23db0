"""
测试公共配置

- 把项目根目录加入 sys.path
- 日志写到临时目录，避免污染工作目录
"""

import os
import pathlib
import sys
import tempfile

project_root = pathlib.Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

os.environ.setdefault("LEDHAT_LOG_DIR", os.path.join(tempfile.gettempdir(), "ledhat_test_logs"))
