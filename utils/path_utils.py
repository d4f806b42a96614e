from pathlib import Path


# 项目根目录（包含 config 和 log 的目录）
BASE_DIR = Path(__file__).resolve().parents[1]

# 常用子目录路径
CONFIG_DIR = BASE_DIR / 'config'
LOG_DIR = BASE_DIR / 'log'

# 日志文件路径
LOG_FILE = LOG_DIR / 'client.log'
