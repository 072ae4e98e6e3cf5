import pymysql
from dotenv import load_dotenv

pymysql.install_as_MySQLdb()

load_dotenv()
