"""loadledger Core -- 任务状态机、增量账本、操作员会话与汇总对账"""
