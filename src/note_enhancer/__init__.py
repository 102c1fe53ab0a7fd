"""学生笔记增强服务：权限归一化、token 预算校验、提示词组装与 LLM 调用。"""
