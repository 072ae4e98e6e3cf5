# gunicorn_config.py
import multiprocessing
import os

# 监听地址和端口
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")

# 工作进程数：公式通常为 (2 * CPU核心数) + 1
workers = multiprocessing.cpu_count() * 2 + 1

# 同步 worker：每个请求在单个线程内完成，数据一致性依赖数据库事务
worker_class = "sync"

# 日志配置
accesslog = os.getenv("GUNICORN_ACCESS_LOG", "-")
errorlog = os.getenv("GUNICORN_ERROR_LOG", "-")
loglevel = "info"

# 进程名
proc_name = "gunicorn_feedback_pro"

timeout = 30
