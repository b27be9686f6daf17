"""loadledger -- 装车任务执行账本与会话对账引擎"""
